"""Typer CLI entrypoint for the eligibility engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from .config import ConfigManager
from .container import EligibilityContainer, create_container
from .logging import LOG_FORMATS, configure_logging
from .pipeline import AuditLogger, JobLoader, serialize_evaluation
from .schemas.config import load_config

app = typer.Typer(help="Job eligibility and match scoring CLI.")


def _build_container(
    config: Optional[Path],
    log_level: str,
    log_format: str = "json",
) -> EligibilityContainer:
    if log_format not in LOG_FORMATS:
        raise typer.BadParameter(
            f"Expected one of: {', '.join(LOG_FORMATS)}", param_hint="'--log-format'"
        )
    settings: dict[str, Any] = {}
    if config:
        loaded = ConfigManager.load_file(config)
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(
                f"Config file must be a YAML object matching the config schema: {exc}",
                param_hint="'--config'",
            ) from exc

    configure_logging(log_level, log_format)
    return create_container(settings=settings)


@app.command()
def report(
    students: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Students JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job JSON path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    applications: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Applications JSONL path."
    ),
    as_of: Optional[str] = typer.Option(None, help="Reference date (ISO) for tenure calculations."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
    log_format: str = typer.Option("json", help="Log output format: json or console."),
) -> None:
    """Evaluate every student against a job and write the eligibility report."""
    container = _build_container(config, log_level, log_format)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    result = pipeline.run(
        students_path=students,
        job_path=job,
        output_path=output,
        applications_path=applications,
        as_of=as_of,
        audit_logger=audit_logger,
    )
    summary = result["summary"]
    typer.echo(
        f"Evaluated {summary['total']} students, {summary['eligible']} eligible. "
        f"Report saved to {output}."
    )


@app.command()
def estimate(
    students: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Students JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Draft job JSON path."),
    as_of: Optional[str] = typer.Option(None, help="Reference date (ISO) for tenure calculations."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Print how many students a draft job would admit."""
    container = _build_container(config, log_level)
    count = container.pipeline().estimate(students_path=students, job_path=job, as_of=as_of)
    typer.echo(f"Eligible students: {count}")


@app.command()
def check(
    student_id: str = typer.Option(..., help="Student identifier to check."),
    students: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Students JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job JSON path."),
    as_of: Optional[str] = typer.Option(None, help="Reference date (ISO) for tenure calculations."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Run the application gate for a single student."""
    container = _build_container(config, log_level)
    population, _ = container.pipeline().load_students(students)
    matches = [student for student in population if student.student_id == student_id]
    if not matches:
        raise typer.BadParameter(f"Unknown student: {student_id}", param_hint="'--student-id'")

    evaluation = container.engine().evaluate_for_student(
        JobLoader().load(job),
        matches[0],
        as_of=as_of,
    )
    record = serialize_evaluation(evaluation)
    if evaluation.eligible:
        typer.echo(f"Eligible: match {record['match_percentage']}%")
        for line in record["summary"]:
            typer.echo(f"  {line}")
    else:
        typer.echo(f"Not eligible: {evaluation.message}")
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
