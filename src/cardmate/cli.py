"""
Command line interface for cardmate.
"""

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any, TypeVar

from tabulate import tabulate

from cardmate.app import Cardmate
from cardmate.app import create_app
from cardmate.config.error_aggregator import init_error_aggregator
from cardmate.config.logging import setup_logging
from cardmate.config.settings import ConfigurationManager
from cardmate.exceptions import CardmateError
from cardmate.exceptions import ConfigError
from cardmate.exceptions import ValidationError
from cardmate.models.course import Course
from cardmate.models.player import ActivePlayer
from cardmate.models.scorecard import Scorecard
from cardmate.scoring import display_score_type
from cardmate.scoring import format_relative
from cardmate.services.round_service import RoundState
from cardmate.utils.cli_utils import ArgumentValidator
from cardmate.utils.cli_utils import CLIBuilder
from cardmate.utils.cli_utils import CLIContext
from cardmate.utils.cli_utils import CLIOptionFactory
from cardmate.utils.cli_utils import CommandCategory
from cardmate.utils.cli_utils import CommandRegistry
from cardmate.utils.logging_utils import get_logger

T = TypeVar('T')


class RoundAborted(Exception):
    """User quit the interactive round."""

def _app(ctx: CLIContext) -> Cardmate:
    app: Cardmate = ctx.services
    app.session.require_user()
    return app

def _resolve(items: Sequence[T], prefix: str, what: str) -> T:
    """Item whose id equals ``prefix`` or uniquely starts with it."""
    exact = [item for item in items if getattr(item, 'id') == prefix]
    if exact:
        return exact[0]
    found = [item for item in items if str(getattr(item, 'id')).startswith(prefix)]
    if len(found) == 1:
        return found[0]
    if not found:
        raise ValidationError(f"No {what} matches {prefix!r}")
    raise ValidationError(f"{len(found)} {what}s match {prefix!r}; give more of the id")

def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))

def _short(record_id: str | None) -> str:
    return (record_id or '')[:8]

def _prompt(text: str) -> str:
    try:
        return input(text).strip()
    except EOFError as e:
        raise RoundAborted() from e

def _confirm(text: str) -> bool:
    try:
        return input(f"{text} [y/N] ").strip().lower() in ('y', 'yes')
    except EOFError:
        return False

def render_scorecard(course: Course, rows: Sequence[tuple[str, Sequence[int | None], int, int]],
                     show_types: bool = False) -> str:
    """Table of per-hole strokes with a par row.

    Unset holes show par; with ``show_types`` the score type label is shown
    instead of the strokes.
    """
    headers = ["Player"] + [str(h.number) for h in course.holes] + ["Total", "+/-"]
    table = [["Par"] + [str(h.par) for h in course.holes] + [str(course.par_total), ""]]
    for name, scores, total, relative in rows:
        cells = []
        for index, hole in enumerate(course.holes):
            score = scores[index] if index < len(scores) else None
            score_type = display_score_type(score, hole.par)
            cells.append(score_type.label if show_types else str(score or hole.par))
        table.append([name] + cells + [str(total), format_relative(relative)])
    return tabulate(table, headers=headers, tablefmt="simple")

def _active_rows(players: Sequence[ActivePlayer]) -> list[tuple[str, Sequence[int | None], int, int]]:
    return [(p.name, p.scores, p.total, p.relative_to_par) for p in players]

class PlayerCommands:
    """Player roster commands."""

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text='List your players',
        category=CommandCategory.PLAYERS,
        options=[CLIOptionFactory.create_format_option()],
        parent_command='players'
    )
    def list_players(ctx: CLIContext) -> int:
        players = _app(ctx).sync.players.items
        if ctx.args.format == 'json':
            _print_json([p.to_record() for p in players])
            return 0
        if not players:
            print("No players yet. Add one with: cardmate players add NAME")
            return 0
        print(tabulate([[_short(p.id), p.name] for p in players], headers=["Id", "Name"]))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='add',
        help_text='Add a player',
        category=CommandCategory.PLAYERS,
        options=[CLIOptionFactory.create_name_argument('player')],
        parent_command='players'
    )
    def add_player(ctx: CLIContext) -> int:
        player = _app(ctx).catalog.add_player(ctx.args.name)
        print(f"Added player {player.name} ({_short(player.id)})")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='rename',
        help_text='Rename a player',
        category=CommandCategory.PLAYERS,
        options=[CLIOptionFactory.create_id_argument('player'), CLIOptionFactory.create_name_argument('player')],
        parent_command='players'
    )
    def rename_player(ctx: CLIContext) -> int:
        app = _app(ctx)
        player = _resolve(app.sync.players.items, ctx.args.player_id, 'player')
        renamed = app.catalog.rename_player(player.id, ctx.args.name)
        print(f"Renamed {player.name} to {renamed.name}")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='remove',
        help_text='Remove a player',
        category=CommandCategory.PLAYERS,
        options=[CLIOptionFactory.create_id_argument('player')],
        parent_command='players'
    )
    def remove_player(ctx: CLIContext) -> int:
        app = _app(ctx)
        player = _resolve(app.sync.players.items, ctx.args.player_id, 'player')
        app.catalog.remove_player(player.id)
        print(f"Removed player {player.name}")
        return 0

class CourseCommands:
    """Course management and lookup commands."""

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text='List your courses',
        category=CommandCategory.COURSES,
        options=[CLIOptionFactory.create_format_option()],
        parent_command='courses'
    )
    def list_courses(ctx: CLIContext) -> int:
        courses = _app(ctx).sync.courses.items
        if ctx.args.format == 'json':
            _print_json([c.to_record() for c in courses])
            return 0
        if not courses:
            print("No courses yet. Add one with: cardmate courses add")
            return 0
        print(tabulate(
            [[_short(c.id), c.name, c.layout, c.par_total] for c in courses],
            headers=["Id", "Name", "Holes", "Par"]
        ))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='show',
        help_text='Show the holes of a course',
        category=CommandCategory.COURSES,
        options=[CLIOptionFactory.create_id_argument('course')],
        parent_command='courses'
    )
    def show_course(ctx: CLIContext) -> int:
        course = _resolve(_app(ctx).sync.courses.items, ctx.args.course_id, 'course')
        print(f"{course.name} ({course.layout} holes, par {course.par_total})")
        print(tabulate(
            [[h.number, h.par, h.distance, h.notes] for h in course.holes],
            headers=["Hole", "Par", "Distance", "Notes"]
        ))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='add',
        help_text='Add a course with default holes',
        category=CommandCategory.COURSES,
        options=[
            {
                'name': '--name',
                'default': 'New Course',
                'help': 'Course name (default: New Course)',
                'validator': lambda x: bool(x.strip())
            },
            CLIOptionFactory.create_layout_option()
        ],
        parent_command='courses'
    )
    def add_course(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = app.catalog.add_course(Course.new(ctx.args.name.strip(), ctx.args.layout, user_id=app.session.user_id))
        print(f"Added course {course.name} ({_short(course.id)}), {course.layout} holes")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='rename',
        help_text='Rename a course',
        category=CommandCategory.COURSES,
        options=[CLIOptionFactory.create_id_argument('course'), CLIOptionFactory.create_name_argument('course')],
        parent_command='courses'
    )
    def rename_course(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = _resolve(app.sync.courses.items, ctx.args.course_id, 'course')
        renamed = app.catalog.rename_course(course.id, ctx.args.name)
        print(f"Renamed {course.name} to {renamed.name}")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='layout',
        help_text='Switch a course between 9 and 18 holes',
        category=CommandCategory.COURSES,
        options=[CLIOptionFactory.create_id_argument('course'), CLIOptionFactory.create_layout_option(positional=True)],
        parent_command='courses'
    )
    def change_layout(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = _resolve(app.sync.courses.items, ctx.args.course_id, 'course')
        updated = app.catalog.set_layout(course.id, ctx.args.layout)
        print(f"{updated.name} now has {updated.layout} holes")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='hole',
        help_text='Edit par, distance or notes of a hole',
        category=CommandCategory.COURSES,
        options=[
            CLIOptionFactory.create_id_argument('course'),
            {'name': 'number', 'type': int, 'help': 'Hole number'},
            {'name': '--par', 'type': int, 'help': 'Par (at least 1)'},
            {'name': '--distance', 'type': int, 'help': 'Distance (at least 0)'},
            {'name': '--notes', 'help': 'Free text notes'}
        ],
        parent_command='courses'
    )
    def edit_hole(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = _resolve(app.sync.courses.items, ctx.args.course_id, 'course')
        updated = app.catalog.update_hole(
            course.id, ctx.args.number, par=ctx.args.par, distance=ctx.args.distance, notes=ctx.args.notes
        )
        hole = updated.hole(ctx.args.number)
        print(f"{updated.name} hole {hole.number}: par {hole.par}, {hole.distance}")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='remove',
        help_text='Remove a course and its scorecards',
        category=CommandCategory.COURSES,
        options=[CLIOptionFactory.create_id_argument('course')],
        parent_command='courses'
    )
    def remove_course(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = _resolve(app.sync.courses.items, ctx.args.course_id, 'course')
        app.catalog.remove_course(course.id)
        print(f"Removed course {course.name}")
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='search',
        help_text='Search the DGCR course database by name',
        category=CommandCategory.COURSES,
        options=[{'name': 'keyword', 'help': 'Course name or part of it'}, CLIOptionFactory.create_format_option()],
        parent_command='courses'
    )
    def search_courses(ctx: CLIContext) -> int:
        results = ctx.services.lookup.search_courses(ctx.args.keyword)
        if ctx.args.format == 'json':
            _print_json([
                {'course_id': r.course_id, 'name': r.name, 'holes': r.holes, 'rating': r.rating, 'location': r.location}
                for r in results
            ])
            return 0
        if not results:
            print("No courses found")
            return 0
        print(tabulate(
            [[r.course_id, r.name, r.holes, r.rating, r.location] for r in results],
            headers=["DGCR id", "Name", "Holes", "Rating", "Location"]
        ))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='import',
        help_text='Add a course from DGCR',
        category=CommandCategory.COURSES,
        options=[{'name': 'dgcr_id', 'help': 'DGCR course id from search results'}],
        parent_command='courses'
    )
    def import_course(ctx: CLIContext) -> int:
        app = _app(ctx)
        course = app.catalog.add_course(app.lookup.import_course(ctx.args.dgcr_id, app.session.user_id))
        print(f"Imported {course.name} ({_short(course.id)}), {course.layout} holes, par {course.par_total}")
        return 0

class RoundCommands:
    """Scoring a round."""

    @staticmethod
    def _score_hole(state: RoundState) -> str:
        """Prompt each player for the current hole.

        Returns 'next', 'back' or 'done'.
        """
        hole = state.current_hole_info
        print(f"\nHole {hole.number} of {state.hole_count}: par {hole.par}, {hole.distance}"
              + (f" ({hole.notes})" if hole.notes else ""))
        for player in state.players:
            while True:
                shown = state.displayed_score(player.id)
                entry = _prompt(f"  {player.name} [{shown}] (+/-, b=back, q=quit): ").lower()
                if entry == 'q':
                    raise RoundAborted()
                if entry == 'b':
                    return 'back'
                if entry == '+':
                    state.increment_score(player.id)
                    continue
                if entry == '-':
                    state.decrement_score(player.id)
                    continue
                if entry == '':
                    state.set_current_score(player.id, shown)
                    break
                try:
                    state.set_current_score(player.id, int(entry))
                    break
                except ValueError:
                    print("  Enter a number of strokes")
        for player in state.players:
            relative = state.relative_through_current(player.id)
            print(f"  {player.name}: {state.score_type(player.id).label}, {format_relative(relative)} through {hole.number}")
        return 'done' if state.is_last_hole else 'next'

    @staticmethod
    @CommandRegistry.register(
        name='play',
        help_text='Score a round hole by hole',
        category=CommandCategory.ROUND,
        options=[
            {'name': '--course', 'required': True, 'help': 'Course id (a unique prefix is enough)'},
            {
                'name': '--player',
                'action': 'append',
                'required': True,
                'help': 'Player id; repeat for each player in the group'
            },
            {'name': '--types', 'action': 'store_true', 'help': 'Show score types in the review table'}
        ],
        parent_command='round'
    )
    def play(ctx: CLIContext) -> int:
        app = _app(ctx)
        state = RoundState()
        state.select_course(_resolve(app.sync.courses.items, ctx.args.course, 'course'))
        roster = app.sync.players.items
        for player_id in ctx.args.player:
            state.add_player(_resolve(roster, player_id, 'player'))

        course = state.course
        print(f"{course.name}: {course.layout} holes, par {course.par_total}")
        print(f"Players: {', '.join(p.name for p in state.players)}")
        try:
            while True:
                step = RoundCommands._score_hole(state)
                if step == 'done':
                    break
                if step == 'back':
                    state.retreat_hole()
                else:
                    state.advance_hole()
        except RoundAborted:
            print("\nRound discarded")
            state.reset_round()
            return 1

        print("\nReview\n")
        print(render_scorecard(course, _active_rows(state.players), ctx.args.types))
        if not _confirm("\nSave scorecard?"):
            print("Round not saved")
            return 0
        scorecard = app.scorecards.save_round(state)
        state.reset_round()
        print(f"Scorecard saved ({_short(scorecard.id)})")
        return 0

class HistoryCommands:
    """Saved scorecards."""

    @staticmethod
    def _summary(scorecard: Scorecard) -> list[Any]:
        date = scorecard.date.strftime('%Y-%m-%d %H:%M') if scorecard.date else ''
        players = ", ".join(
            f"{p.player_name or 'Unknown'} {p.total_score} ({format_relative(p.relative_to_par)})"
            for p in scorecard.players
        )
        return [_short(scorecard.id), date, scorecard.course_name or 'Deleted course', players]

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text='List saved scorecards, newest first',
        category=CommandCategory.HISTORY,
        options=[CLIOptionFactory.create_format_option()],
        parent_command='history'
    )
    def list_history(ctx: CLIContext) -> int:
        scorecards = _app(ctx).scorecards.list_history()
        if ctx.args.format == 'json':
            _print_json([
                {
                    'id': s.id,
                    'date': s.date.isoformat() if s.date else None,
                    'course': s.course_name,
                    'total_score': s.total_score,
                    'relative_to_par': s.relative_to_par,
                    'players': [
                        {'name': p.player_name, 'total_score': p.total_score, 'relative_to_par': p.relative_to_par}
                        for p in s.players
                    ],
                }
                for s in scorecards
            ])
            return 0
        if not scorecards:
            print("No rounds played yet")
            return 0
        print(tabulate([HistoryCommands._summary(s) for s in scorecards], headers=["Id", "Date", "Course", "Players"]))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='show',
        help_text='Show a saved scorecard hole by hole',
        category=CommandCategory.HISTORY,
        options=[
            CLIOptionFactory.create_id_argument('scorecard'),
            {'name': '--types', 'action': 'store_true', 'help': 'Show score types instead of strokes'}
        ],
        parent_command='history'
    )
    def show_scorecard(ctx: CLIContext) -> int:
        app = _app(ctx)
        scorecard = _resolve(app.scorecards.list_history(), ctx.args.scorecard_id, 'scorecard')
        summary = HistoryCommands._summary(scorecard)
        print(f"{summary[2]}, {summary[1]}")
        course = app.sync.courses.get(scorecard.course_id) if scorecard.course_id else None
        if course is None:
            print(tabulate(
                [[p.player_name or 'Unknown', p.total_score, format_relative(p.relative_to_par)] for p in scorecard.players],
                headers=["Player", "Total", "+/-"]
            ))
            return 0
        rows = [(p.player_name or 'Unknown', p.scores, p.total_score, p.relative_to_par) for p in scorecard.players]
        print(render_scorecard(course, rows, ctx.args.types))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='delete',
        help_text='Delete a saved scorecard',
        category=CommandCategory.HISTORY,
        options=[
            CLIOptionFactory.create_id_argument('scorecard'),
            {'name': '--yes', 'action': 'store_true', 'help': 'Do not ask for confirmation'}
        ],
        parent_command='history'
    )
    def delete_scorecard(ctx: CLIContext) -> int:
        app = _app(ctx)
        scorecard = _resolve(app.scorecards.list_history(), ctx.args.scorecard_id, 'scorecard')
        if not ctx.args.yes and not _confirm(f"Delete scorecard {_short(scorecard.id)}?"):
            print("Cancelled")
            return 0
        app.scorecards.delete_scorecard(scorecard.id)
        print(f"Deleted scorecard {_short(scorecard.id)}")
        return 0

class SettingsCommands:
    """Display preferences."""

    @staticmethod
    @CommandRegistry.register(
        name='show',
        help_text='Show preferences',
        category=CommandCategory.SETTINGS,
        parent_command='settings'
    )
    def show_settings(ctx: CLIContext) -> int:
        preferences = ctx.services.preferences.preferences
        print(tabulate(
            [
                ["Dark mode", "on" if preferences.dark_mode else "off"],
                ["Font size", preferences.font_size],
                ["Store", ctx.config.store.backend],
                ["Config directory", ctx.config.config_dir],
            ],
            tablefmt="plain"
        ))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='set',
        help_text='Change preferences',
        category=CommandCategory.SETTINGS,
        options=[
            {'name': '--dark-mode', 'choices': ['on', 'off'], 'help': 'Dark mode'},
            {'name': '--font-size', 'choices': ['small', 'medium', 'large'], 'help': 'Font size'}
        ],
        parent_command='settings'
    )
    def set_settings(ctx: CLIContext) -> int:
        service = ctx.services.preferences
        if ctx.args.dark_mode is None and ctx.args.font_size is None:
            ctx.parser.error("settings set needs --dark-mode or --font-size")
        if ctx.args.dark_mode is not None:
            service.set_dark_mode(ctx.args.dark_mode == 'on')
        if ctx.args.font_size is not None:
            service.set_font_size(ctx.args.font_size)
        return SettingsCommands.show_settings(ctx)

def create_parser() -> argparse.ArgumentParser:
    """Create argument parser from the registered commands."""
    builder = CLIBuilder(description='Disc golf scorekeeping')
    for command in CommandRegistry.commands():
        builder.add_command(command)
    return builder.build()

def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigurationManager().load_config(args.config_dir)
    except ConfigError as e:
        print(f"Configuration error: {e.user_message}", file=sys.stderr)
        return 1

    log_file = args.log_file or (config.resolve(config.logging.file) if config.logging.file else None)
    setup_logging(config.logging, dev_mode=args.dev, verbose=args.verbose, log_file=log_file)
    logger = get_logger(__name__)
    aggregator = init_error_aggregator(config.error_aggregation)

    command = CommandRegistry._commands.get(args.command_key)
    if not command:
        logger.error(f"Unknown command: {args.command}")
        return 1

    errors = ArgumentValidator.validate_args(args, command)
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1

    app: Cardmate | None = None
    try:
        app = create_app(config, args.user)
        ctx = CLIContext(args=args, logger=logger, config=config, parser=parser, services=app)
        return command.handler(ctx)
    except CardmateError as e:
        logger.debug(f"{command.key} failed: {e}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1
    except Exception:
        logger.exception("Unhandled exception")
        return 1
    finally:
        if app is not None:
            app.close()
        aggregator.shutdown()

if __name__ == '__main__':
    sys.exit(main())
