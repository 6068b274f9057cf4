# pkmeans/main.py
from __future__ import annotations

import argparse
import logging
import sys
from multiprocessing import cpu_count
from typing import List, Optional

from pkmeans.core.errors import KMeansError
from pkmeans.data.instance import load_instance
from pkmeans.data.validation import validate_instance
from pkmeans.experiments.config import (
    DEFAULT_LOG_FILE,
    DEFAULT_SEED,
    EngineKind,
    RunConfig,
)
from pkmeans.experiments.runner import BenchmarkRunner, compare_to_baseline
from pkmeans.reporting.report import append_timing_log, format_report
from pkmeans.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkmeans",
        description="Параллельная кластеризация K-means экземпляра задачи из файла или stdin.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Файл экземпляра задачи (по умолчанию читается stdin).",
    )
    parser.add_argument(
        "--engine",
        type=str,
        choices=[e.value for e in EngineKind],
        default=EngineKind.THREADED.value,
        help="Реализация движка: однопоточная или на пулах потоков.",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=min(4, cpu_count()),
        help="Потоки фаз назначения и пересчёта.",
    )
    parser.add_argument(
        "--search-threads",
        type=int,
        default=2,
        help="Потоки поиска ближайшего центра (разбиение по K).",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Размер чанка точек (по умолчанию поровну на поток).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help="Seed генератора для выбора начальных центров.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=DEFAULT_LOG_FILE,
        help="Журнал, в который дописывается блок таймингов.",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=1,
        help="Число измеряемых прогонов для статистики таймингов.",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=0,
        help="Число разогревочных прогонов (не входят в статистику).",
    )
    parser.add_argument(
        "--compare-serial",
        action="store_true",
        help="Дополнительно прогнать однопоточный baseline и вывести ускорение.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    config = RunConfig(
        engine=EngineKind(args.engine),
        n_threads=args.threads,
        search_threads=args.search_threads,
        chunk_size=args.chunk_size,
        seed=args.seed,
        log_path=args.log_file,
        repeats=args.repeats,
        warmup=args.warmup,
    )

    try:
        instance = load_instance(args.input if args.input else sys.stdin)
        validate_instance(instance)

        runner = BenchmarkRunner(instance, config, logger)
        result, points, _ = runner.run_once()

        if config.repeats > 1 or config.warmup > 0 or args.compare_serial:
            stats = runner.run()
            if args.compare_serial:
                baseline = BenchmarkRunner(instance, config.as_serial(), logger).run()
                comparison = compare_to_baseline(baseline, stats, config.n_threads)
                logger.info(
                    f"Speedup vs serial: {comparison['speedup']:.3f}, "
                    f"efficiency: {comparison['efficiency']:.3f} (p={config.n_threads})"
                )
    except KMeansError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Unable to read instance: {e}")
        return 1

    sys.stdout.write(format_report(result, points))
    append_timing_log(result, config.log_path, logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
