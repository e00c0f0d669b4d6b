"""Interactive CLI application."""
import logging
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from study_planner.activity import format_duration, get_streaks, overdue_revisions
from study_planner.config import LOG_LEVEL, get_data_path
from study_planner.dashboard import (
    calc_momentum_score, calc_readiness_score, get_readiness_color, get_study_stats, get_subject_metrics,
)
from study_planner.importer import load_export
from study_planner.insights import get_future_insights, get_mentor_report, get_past_insights, get_present_insights
from study_planner.models import ExportData, UPCOMING
from study_planner.predictor import predict_test_score
from study_planner.progress import calculate_progress
from study_planner.review import TopicTiers, classify_subject_topics, classify_topics
from study_planner.scoring import get_score_color

console = Console()


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler(console=console)],
    )


def show_welcome(data_path: str):
    console.print(Panel(
        f"[bold]Study Planner[/bold]\n[dim]Progress, readiness and test prediction[/dim]\n[dim]{data_path}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("dashboard", "Readiness score + subject progress"),
        ("mentor", "Daily mentor report"),
        ("insights", "Past, present and future insights"),
        ("tests", "Upcoming tests: prediction + topic tiers"),
        ("streaks", "Streaks, momentum and overdue revisions"),
        ("load", "Switch export file"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def render_tiers(tiers: TopicTiers, title: str) -> None:
    table = Table(title=title)
    table.add_column("Tier")
    table.add_column("Topic", style="cyan")
    table.add_column("Chapter", style="dim")
    table.add_column("Score", justify="right")
    for label, topics in (("Weak", tiers.weak), ("Average", tiers.average), ("Strong", tiers.strong)):
        for t in topics[:5]:
            color = get_score_color(t.overall_score)
            table.add_row(f"[{color}]{label}[/{color}]", t.microtopic, t.chapter, f"{t.overall_score:.0f}")
    if table.row_count:
        console.print(table)
    else:
        console.print(f"[dim]{title}: not enough data yet.[/dim]")


def cmd_dashboard(data: ExportData):
    stats = calculate_progress(data.tasks)
    readiness = calc_readiness_score(stats, data.tasks, data.test_plans)
    color = get_readiness_color(readiness["score"])
    summary = get_study_stats(stats, data.test_plans)

    bar_filled = readiness["score"] // 50
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(Panel(
        f"Readiness: [bold]{readiness['score']}[/bold] / 1000 {bar} [{color}]{readiness['tier']}[/{color}]",
        title="Readiness Dashboard", border_style="blue",
    ))

    table = Table(title="Subject Breakdown")
    table.add_column("Subject", style="cyan")
    table.add_column("Tasks", justify="right")
    table.add_column("Completion", justify="right")
    table.add_column("Knowledge", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Time", justify="right")
    for name, metrics in get_subject_metrics(stats, data.test_plans).items():
        subject = stats.subjects[name]
        accuracy = f"{subject.avg_accuracy:.0f}%" if subject.avg_accuracy is not None else "-"
        table.add_row(
            name,
            f"{subject.completed}/{subject.total}",
            f"{metrics['completion']:.0f}%",
            f"[{get_score_color(metrics['knowledge'])}]{metrics['knowledge']:.0f}[/]",
            accuracy,
            format_duration(subject.total_time),
        )
    console.print(table)

    console.print(f"\n  Completion: [bold]{readiness['syllabus_completion']:.0f}%[/bold]  |  "
                  f"Knowledge: [bold]{readiness['knowledge_depth']:.0f}[/bold]  |  "
                  f"Consistency: [bold]{readiness['consistency']:.0f}%[/bold]  |  "
                  f"Studied: [bold]{format_duration(summary['time_studied'])}[/bold]  |  "
                  f"Questions: [bold]{summary['questions_attempted']}[/bold]")

    subject = Prompt.ask("\nTopic tiers for subject (blank to skip)", default="").strip()
    if subject:
        if subject not in stats.subjects:
            console.print(f"[red]Unknown subject: {subject}[/red]")
            return
        render_tiers(classify_subject_topics(stats, subject), f"{subject} Topics")


def cmd_mentor(data: ExportData):
    stats = calculate_progress(data.tasks)
    report = get_mentor_report(stats, data.tasks, data.test_plans)
    lines = []
    if report["weakest_subject"]:
        lines.append(f"Weakest subject: [red]{report['weakest_subject']}[/red]")
        for t in report["weak_topics"]:
            lines.append(f"  • {t['name']} [dim]({t['chapter']})[/dim] {t['score']:.0f} - {t['reason']}")
    else:
        lines.append("[dim]Not enough data to find a weakest subject.[/dim]")
    if report["strongest_topic"]:
        st = report["strongest_topic"]
        lines.append(f"Strongest recent topic: [green]{st['name']}[/green] ({st['score']:.0f})")
    lines.append(f"Active days in the last 7: [bold]{report['active_days_last_7']}[/bold]")
    if report["last_test"]:
        test = report["last_test"]
        pct = test.analysis.percentage
        lines.append(f"Last test: {test.name}" + (f" - {pct:.0f}%" if pct is not None else ""))
    console.print(Panel("\n".join(lines), title="Mentor Report", border_style="cyan"))


def cmd_insights(data: ExportData):
    stats = calculate_progress(data.tasks)
    past = get_past_insights(data.tasks)
    if past:
        table = Table(title="Peak Study Days")
        table.add_column("Date")
        table.add_column("Time", justify="right")
        for day in past["peak_days"]:
            table.add_row(day["date"], format_duration(day["duration"]))
        console.print(table)
        for subject, items in past["breakthroughs"].items():
            for item in items:
                console.print(f"  [green]+{item['change']:.0f}[/green] {subject}: {item['chapter']}")
    else:
        console.print("[dim]Complete at least 10 tasks to unlock the preparation rewind.[/dim]")

    present = get_present_insights(stats, data.tasks)
    if not present:
        console.print("[dim]No completed tasks in the last 14 days.[/dim]")
        return
    if present["strongest_subject"]:
        s = present["strongest_subject"]
        console.print(f"\n  Strongest subject: [green]{s['name']}[/green] ({s['score']:.0f})")
    critical = present["critical_topic"]
    if critical:
        console.print(f"  Critical topic: [red]{critical['name']}[/red] ({critical['subject']}, {critical['score']:.0f})")

    target = IntPrompt.ask("Target score", default=600)
    future = get_future_insights(data.test_plans, critical, target)
    if future:
        console.print(f"  Last test: [bold]{future['last_test_score']:g}[/bold]  →  "
                      f"Projected: [bold]{future['projected_score']:g}[/bold]")
        for gap in future["roadmap"]:
            console.print(f"  [yellow]{gap['subject']}[/yellow]: up to +{gap['potential_gain']:g} marks")


def cmd_tests(data: ExportData):
    stats = calculate_progress(data.tasks)
    upcoming = sorted((t for t in data.test_plans if t.status == UPCOMING), key=lambda t: t.date)
    if not upcoming:
        console.print("[yellow]No upcoming tests.[/yellow]")
        return
    table = Table(title="Upcoming Tests")
    table.add_column("#", justify="right")
    table.add_column("Test", style="cyan")
    table.add_column("Date")
    table.add_column("Topics", justify="right")
    table.add_column("Predicted", justify="right")
    for i, test in enumerate(upcoming, 1):
        predicted = predict_test_score(test, stats)
        max_marks = (test.total_questions or 0) * 4
        table.add_row(str(i), test.name, test.date, str(len(test.topic_status)),
                      f"{predicted}/{max_marks}" if max_marks else "-")
    console.print(table)
    choice = IntPrompt.ask("Analyze test #", choices=[str(i) for i in range(1, len(upcoming) + 1)], default=1)
    test = upcoming[choice - 1]
    render_tiers(classify_topics(test.syllabus, stats), f"{test.name} Topics")


def cmd_streaks(data: ExportData):
    today = date.today()
    streaks = get_streaks(data.tasks, today)
    momentum = calc_momentum_score(data.tasks, today)
    console.print(Panel(
        f"Consistency: [bold]{streaks['consistency']}[/bold] days  |  "
        f"Completion: [bold]{streaks['completion']}[/bold] days  |  "
        f"Revision: [bold]{streaks['revision']}[/bold] days  |  "
        f"Accuracy ≥85%: [bold]{streaks['accuracy']}[/bold] tasks\n"
        f"Momentum: [bold]{momentum:.0f}[/bold] / 100",
        title="Streaks", border_style="magenta",
    ))
    overdue = overdue_revisions(data.tasks, today)
    if overdue:
        console.print(f"\n[bold]Overdue revisions ({len(overdue)}):[/bold]")
        for task in overdue[:10]:
            console.print(f"  [red]{task.date}[/red] {task.name} ({task.subject} > {task.chapter})")


def main():
    setup_logging()
    data_path = get_data_path()
    show_welcome(data_path)

    commands = {
        "dashboard": cmd_dashboard,
        "mentor": cmd_mentor,
        "insights": cmd_insights,
        "tests": cmd_tests,
        "streaks": cmd_streaks,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        try:
            if choice in commands:
                if not Path(data_path).exists():
                    console.print(f"[red]File not found: {data_path}[/red] Use 'load' to pick an export.")
                    continue
                commands[choice](load_export(data_path))
            elif choice == "load":
                file_path = Prompt.ask("File path")
                if not Path(file_path).exists():
                    console.print(f"[red]File not found: {file_path}[/red]")
                    continue
                data = load_export(file_path)
                data_path = file_path
                console.print(f"[green]Loaded {len(data.tasks)} tasks and {len(data.test_plans)} tests.[/green]")
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep going![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
