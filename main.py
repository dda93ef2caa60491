import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from reactgames import ReactGamesError
from reactgames.config.settings import RunConfig, WindowConfig, load_run_config
from reactgames.data.models import SessionConfig, SessionData
from reactgames.data.session_io import load_session
from reactgames.game.app import GameApp
from reactgames.game.trial_generator import generate_block
from reactgames.game.variants import get_variant, variant_names


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a reaction-time game session")
    parser.add_argument("--game", choices=variant_names(), help="Game type (overrides the session file)")
    parser.add_argument("--session", type=Path, help="XML session description")
    parser.add_argument("--settings", type=Path, default=Path("reactgames.json"), help="JSON settings file")
    parser.add_argument("--output-dir", help="Where logs and session results are written")
    parser.add_argument("--seed", type=int, help="Seed for generated trial values")
    parser.add_argument("--width", type=int, default=WindowConfig.width)
    parser.add_argument("--height", type=int, default=WindowConfig.height)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(run_config: RunConfig, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    trace_path = run_config.output_path(run_config.trace_file)
    trace_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(trace_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(message)s"))
    logging.getLogger("reactgames.trace").addHandler(handler)


def build_session(args: argparse.Namespace, run_config: RunConfig) -> SessionData:
    if args.session is not None:
        return load_session(args.session, seed=run_config.seed, game_type=args.game)
    variant = get_variant(args.game or run_config.game_type)
    config = SessionConfig(game_type=variant.name)
    return SessionData(config=config, trials=generate_block(config, seed=run_config.seed, sided=variant.sided))


def main(argv=None) -> int:
    args = parse_args(argv)
    run_config = load_run_config(args.settings)
    if args.output_dir:
        run_config = replace(run_config, output_dir=args.output_dir)
    if args.seed is not None:
        run_config = replace(run_config, seed=args.seed)
    setup_logging(run_config, args.verbose)

    try:
        data = build_session(args, run_config)
        variant = get_variant(data.config.game_type)
    except ReactGamesError as exc:
        logging.getLogger(__name__).error(str(exc))
        return 2

    app = GameApp(WindowConfig(width=args.width, height=args.height), run_config, data, variant)
    summary = app.run()

    print("Game finished")
    if summary is not None:
        print(
            f"trials={summary.total_trials} successes={summary.successes} "
            f"success_rate={summary.success_rate:.2f} mean_rt={summary.mean_response_time:.3f}s "
            f"mean_accuracy={summary.mean_accuracy:.3f}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
