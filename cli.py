#!/usr/bin/env python3
"""
ThorEye Audit Engine - Operator CLI

Re-score and fatal-check stored reports, resolve forms offline.
"""

import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from engine import (
    AuditSession,
    EngineError,
    live_score,
    audited_fatal_check,
    adjusted_score,
    normalize_report,
    parse_form,
)
from engine.scoring import deduction_for
from models import AuditReport, ScoreResult
from repositories import get_repository

console = Console()


def load_json(path):
    """Read a JSON file, exiting cleanly on bad input."""
    path = Path(path)
    if not path.exists():
        console.print(f"[red]No such file: {path}[/red]")
        sys.exit(1)
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            console.print(f"[red]{path} is not valid JSON: {e}[/red]")
            sys.exit(1)


def score_report_file(path) -> tuple[AuditReport, ScoreResult]:
    """Load a stored report (either shape) and re-run the live evaluator."""
    return _score_raw(load_json(path))


def _score_raw(data) -> tuple[AuditReport, ScoreResult]:
    report = normalize_report(data)
    return report, live_score(a.to_scored() for a in report.iter_answers())


def fatal_check_file(path) -> dict:
    """Live vs audited fatal status for a stored report."""
    data = load_json(path)
    report, live = _score_raw(data)
    return {
        "auditId": report.audit_id,
        "liveHasFatal": live.has_fatal,
        "liveScore": live.score,
        "auditedHasFatal": audited_fatal_check(data),
        "storedScore": report.score,
        "adjustedScore": adjusted_score(data),
    }


def resolve_form_file(form_path, answers_path=None) -> AuditSession:
    """
    Replay an answers file through a fresh session.

    Answers are applied in file order, so repetition triggers create their
    instances just as they would in the UI.
    """
    form = parse_form(load_json(form_path))
    session = AuditSession(form)
    if answers_path:
        answers = load_json(answers_path)
        if not isinstance(answers, dict):
            console.print("[red]Answers file must be an object of questionId -> answer[/red]")
            sys.exit(1)
        for question_id, value in answers.items():
            session.set_answer(str(question_id), value)
    return session


def cmd_score(args):
    report, result = score_report_file(args.report)

    table = Table(title=f"Audit {report.audit_id or '(no id)'}", box=box.ROUNDED)
    table.add_column("Section", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    table.add_column("Weight", justify="right")
    table.add_column("Deducted", justify="right", style="red")

    for section in report.section_answers:
        for a in section.answers:
            if a.weightage <= 0:
                continue
            deducted = deduction_for(a.to_scored())
            answer = f"[bold red]{a.answer}[/bold red]" if a.is_fatal and a.answer == "Fatal" else a.answer
            table.add_row(
                section.section_name,
                a.question_text,
                answer or "[dim]-[/dim]",
                f"{a.weightage:g}",
                f"{deducted:g}" if deducted else "",
            )

    console.print(table)
    style = "red" if result.has_fatal else "green"
    console.print(f"\n[{style}]Score: {result.score}%[/{style}]"
                  f"  [dim](deducted {result.deducted_points:g} of {result.total_weightage:g})[/dim]")
    if result.has_fatal:
        console.print("[bold red]FATAL[/bold red]")
    if result.score != report.score:
        console.print(f"[yellow]Stored score was {report.score}%[/yellow]")


def cmd_fatal_check(args):
    check = fatal_check_file(args.report)

    table = Table(title=f"Fatal check: {check['auditId'] or '(no id)'}", box=box.ROUNDED)
    table.add_column("Rule", style="cyan")
    table.add_column("Fatal", justify="center")
    table.add_column("Score", justify="right")

    def flag(value):
        return "[red]yes[/red]" if value else "[green]no[/green]"

    table.add_row("Live (submission/edit)", flag(check["liveHasFatal"]), str(check["liveScore"]))
    table.add_row("Audited (ATA)", flag(check["auditedHasFatal"]), str(check["adjustedScore"]))
    console.print(table)

    if check["liveHasFatal"] != check["auditedHasFatal"]:
        console.print("[yellow]Live and audited rules disagree for this report.[/yellow]")


def cmd_resolve(args):
    session = resolve_form_file(args.form, args.answers)
    visible = session.resolve()
    answers = session.answers

    console.print(f"\n[bold]{session.form.name}[/bold]")
    for section in visible.visible_sections:
        console.print(f"\n[cyan]{section.name}[/cyan] [dim]({section.id})[/dim]")
        for q in visible.visible_questions_by_section.get(section.id, []):
            marks = []
            if q.mandatory:
                marks.append("*")
            if q.is_fatal:
                marks.append("[red]F[/red]")
            answer = answers.get(q.id, "")
            console.print(f"  {' '.join(marks):4} {q.text}  [dim]{answer or '-'}[/dim]")

    result = session.score()
    console.print(f"\n[bold]Live score: {result.score}%[/bold]" + ("  [red]FATAL[/red]" if result.has_fatal else ""))


def cmd_list(args):
    reports = get_repository().audits.list()
    if not reports:
        console.print("[dim]No audits stored yet.[/dim]")
        return

    table = Table(title="Audits", box=box.ROUNDED)
    table.add_column("Audit", style="cyan")
    table.add_column("Form")
    table.add_column("Agent")
    table.add_column("Auditor")
    table.add_column("Score", justify="right")
    table.add_column("ATA", justify="center")
    table.add_column("Updated", style="dim")

    for r in sorted(reports, key=lambda x: x.updated_at, reverse=True):
        score = f"[red]{r.score}% F[/red]" if r.has_fatal else f"{r.score}%"
        table.add_row(
            r.audit_id,
            r.form_name,
            r.agent,
            r.auditor,
            score,
            "yes" if r.ata_review else "",
            r.updated_at.isoformat()[:16],
        )

    console.print(table)


def cli(argv=None):
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="ThorEye audit form engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  thoreye score report.json                    # Re-score a stored report
  thoreye fatal-check report.json              # Live vs ATA fatal rules
  thoreye resolve form.json --answers a.json   # Visible questions for answers
  thoreye list                                 # Stored audits
        """
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("score", help="Re-score a stored report")
    p.add_argument("report")
    p.set_defaults(func=cmd_score)

    p = sub.add_parser("fatal-check", help="Compare live and audited fatal status")
    p.add_argument("report")
    p.set_defaults(func=cmd_fatal_check)

    p = sub.add_parser("resolve", help="Resolve a form's visible structure")
    p.add_argument("form")
    p.add_argument("--answers", "-a", help="JSON object of questionId -> answer")
    p.set_defaults(func=cmd_resolve)

    p = sub.add_parser("list", help="List stored audits")
    p.set_defaults(func=cmd_list)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
