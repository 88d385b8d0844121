# cfdi_extractor/main.py
from __future__ import annotations
import argparse
import sys
import zipfile
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from cfdi_extractor.core.config import EngineSettings
from cfdi_extractor.core.exceptions import EmptyBatchError
from cfdi_extractor.facade.batch_processor import CfdiBatchProcessor
from cfdi_extractor.modules.json_writer import JSONWriter
from cfdi_extractor.utils.logger import get_logger, set_level


# Códigos de salida
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_EMPTY_BATCH = 2
EXIT_UNKNOWN_ERROR = 99


def iter_xml_sources(paths: Sequence[Path], logger=None) -> Iterator[Tuple[str, bytes]]:
    """
    Recorre archivos .xml, directorios (recursivo) y archivos .zip.

    Yields:
        Pares (nombre, contenido) en orden de nombre dentro de cada entrada
    """
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix.lower() in (".xml", ".zip"):
                    yield from iter_xml_sources([child], logger)
        elif path.suffix.lower() == ".zip":
            with zipfile.ZipFile(path) as archive:
                for info in sorted(archive.infolist(), key=lambda i: i.filename):
                    if not info.is_dir() and info.filename.lower().endswith(".xml"):
                        yield f"{path.name}/{info.filename}", archive.read(info)
        elif path.suffix.lower() == ".xml":
            yield path.name, path.read_bytes()
        elif logger:
            logger.warning("Se ignora %s: no es .xml, .zip ni directorio", path)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cfdi-extractor",
        description="Extrae y agrega montos de comprobantes CFDI (XML).",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Archivos .xml, .zip o directorios")
    parser.add_argument("-o", "--output", type=Path, help="Archivo JSON de salida (por defecto stdout)")
    parser.add_argument("-w", "--workers", type=int, help="Hilos de parseo (sobrescribe CFDI_MAX_WORKERS)")
    parser.add_argument("--log-level", help="Nivel de log (sobrescribe CFDI_LOG_LEVEL)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:

    args = build_arg_parser().parse_args(argv)
    logger = None

    try:
        # PASO 1: Cargar configuración
        try:
            overrides = {}
            if args.workers is not None:
                overrides["MAX_WORKERS"] = args.workers
            if args.log_level:
                overrides["LOG_LEVEL"] = args.log_level
            cfg = EngineSettings(**overrides)
            logger = get_logger("Main", cfg.LOG_LEVEL)
            set_level(cfg.LOG_LEVEL)
        except Exception as exc:
            # Si falla la configuración, loggear a stderr
            print(f"ERROR CRÍTICO: No se pudo cargar la configuración: {exc}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

        # PASO 2: Procesar lote
        sources = list(iter_xml_sources(args.paths, logger))
        logger.info("Procesando %d archivos XML", len(sources))
        result = CfdiBatchProcessor(cfg).process(sources)

        try:
            dataset = result.require_dataset()
        except EmptyBatchError as exc:
            logger.error(str(exc))
            return EXIT_EMPTY_BATCH

        # PASO 3: Escribir salida
        writer = JSONWriter(args.output.parent if args.output else Path("."))
        if args.output:
            if writer.save_dataset(dataset, args.output.name, result.failures) is None:
                return EXIT_UNKNOWN_ERROR
        else:
            writer.dump(dataset, sys.stdout, result.failures)
            sys.stdout.write("\n")

        summary = dataset.summary
        logger.info("RESUMEN:")
        logger.info("  Documentos procesados: %d de %d", result.exitosos, result.intentados)
        logger.info("  Documentos fallidos: %d", len(result.fallidos))
        logger.info("  Total: %s  Subtotal: %s  Impuestos: %s",
                    summary.total_amount, summary.total_subtotal, summary.total_taxes)
        if summary.advertencias:
            logger.warning("  Advertencias de conciliación: %d", len(summary.advertencias))

        return EXIT_SUCCESS

    except KeyboardInterrupt:
        if logger:
            logger.warning("Proceso interrumpido por el usuario (Ctrl+C)")
        else:
            print("\nProceso interrumpido por el usuario", file=sys.stderr)
        return EXIT_UNKNOWN_ERROR

    except Exception as exc:
        if logger:
            logger.critical("Error inesperado en main(): %s", exc, exc_info=True)
        else:
            print(f"ERROR CRÍTICO inesperado: {exc}", file=sys.stderr)
        return EXIT_UNKNOWN_ERROR


if __name__ == "__main__":
    sys.exit(main())
