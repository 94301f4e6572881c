#!/usr/bin/env python3
"""
CLI for the cricket live score service
"""
import logging
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from livescore.config import settings
from livescore.database import init_db, get_session
from livescore.models import Admin, Match
from livescore.auth.utils import create_access_token
from livescore.engine import BallRequest
from livescore.engine.errors import ScoringError
from livescore.generators import SquadGenerator
from livescore.services import innings as innings_service
from livescore.services.scoring import ScoringService

console = Console()


@click.group()
def cli():
    """Cricket Live Score - ball-by-ball scoring"""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--overs", default=20, type=click.IntRange(1, 50), help="Overs per innings")
@click.option("--venue", default="Wankhede Stadium", help="Match venue")
def seed(overs: int, venue: str):
    """Create two demo teams with full squads and a match between them"""
    init_db()
    session = get_session()
    try:
        team1, team2 = SquadGenerator.save_teams_to_db(session, SquadGenerator.create_teams(2))
        match = Match(team1_id=team1.id, team2_id=team2.id, overs_limit=overs, venue=venue)
        session.add(match)
        session.commit()

        for team in (team1, team2):
            table = Table(title=f"{team.name} ({team.short_name}) - team #{team.id}")
            table.add_column("ID", justify="right")
            table.add_column("Name", style="cyan")
            table.add_column("Role", style="magenta")
            for player in team.players:
                table.add_row(str(player.id), player.name, player.role.value)
            console.print(table)

        console.print(Panel(
            f"Match #{match.id}: {team1.name} vs {team2.name}, {overs} overs at {venue}",
            title="[bold green]Seeded[/bold green]",
        ))
    finally:
        session.close()


@cli.command()
@click.option("--email", required=True, help="Admin email")
@click.option("--name", default=None, help="Admin display name")
@click.option("--minutes", default=None, type=int, help="Token lifetime in minutes")
def issue_token(email: str, name: Optional[str], minutes: Optional[int]):
    """Create (or reuse) an admin account and print a bearer token for it"""
    init_db()
    session = get_session()
    try:
        admin = session.query(Admin).filter(Admin.email == email).first()
        if admin is None:
            admin = Admin(email=email, name=name or email.split("@")[0])
            session.add(admin)
            session.commit()
            console.print(f"[green]Created admin #{admin.id} ({admin.email})[/green]")
        token = create_access_token(admin.id, expires_minutes=minutes)
        click.echo(token)
    finally:
        session.close()


def _print_scorecard(card: dict):
    """Print innings scorecard"""
    console.print(Panel(
        f"{card['runs']}/{card['wickets']} ({card['overs']} overs) - RR: {card['run_rate']}"
        f"  Extras: {card['extras']['total']}  [{card['status']}]",
        title=f"[bold]Innings {card['innings_number']}[/bold]",
    ))

    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")
    for row in card["batting"]:
        bat_table.add_row(
            row["name"] or f"#{row['player_id']}",
            row["out_type"] or "not out",
            str(row["runs"]),
            str(row["balls"]),
            str(row["fours"]),
            str(row["sixes"]),
            f"{row['strike_rate']:.1f}",
        )
    console.print(bat_table)

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("M", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")
    for row in card["bowling"]:
        bowl_table.add_row(
            row["name"] or f"#{row['player_id']}",
            str(row["overs"]),
            str(row["maidens"]),
            str(row["runs"]),
            str(row["wickets"]),
            f"{row['economy']:.1f}",
        )
    console.print(bowl_table)


@cli.command()
@click.argument("innings_id", type=int)
def scorecard(innings_id: int):
    """Show the scorecard of an innings"""
    session = get_session()
    try:
        _print_scorecard(innings_service.scorecard(session, innings_id))
    except ScoringError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command()
@click.argument("innings_id", type=int)
@click.argument("outcome")
@click.option("--bowler", "bowler_id", type=int, default=None, help="Bowler for this delivery")
@click.option("--fielder", "fielder_id", type=int, default=None, help="Fielder credited with the dismissal")
@click.option("--dismissal", "dismissal_type", default=None, help="caught, bowled, run_out, stumped, lbw, hit_wicket, other")
@click.option("--next-batsman", "next_batsman_id", type=int, default=None, help="Incoming batsman after a wicket")
@click.option("--next-role", "next_batsman_role", default="striker", help="striker or non_striker")
def ball(innings_id: int, outcome: str, bowler_id, fielder_id, dismissal_type, next_batsman_id, next_batsman_role):
    """Apply one ball outcome (dot, run, two, four, six, wide, wicket, ...) to an innings"""
    request = BallRequest(
        outcome=outcome,
        bowler_id=bowler_id,
        fielder_id=fielder_id,
        dismissal_type=dismissal_type,
        next_batsman_id=next_batsman_id,
        next_batsman_role=next_batsman_role if next_batsman_id is not None else None,
    )
    try:
        result = ScoringService().apply_ball(innings_id, request)
    except ScoringError as e:
        console.print(f"[red]{type(e).__name__}: {e.message}[/red]")
        raise SystemExit(1)

    score = result.state.score
    entry = result.commentary
    console.print(f"[cyan]{entry.over - 1}.{entry.ball}[/cyan] {entry.description}")
    console.print(f"[bold]{score.runs}/{score.wickets}[/bold] ({score.overs_display} overs)")
    if result.innings_completed:
        console.print(f"[yellow]Innings completed: {', '.join(r.value for r in result.completion)}[/yellow]")
    if result.match_completed:
        console.print(f"[bold green]{result.state.match.result_summary}[/bold green]")


if __name__ == "__main__":
    cli()
