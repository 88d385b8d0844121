# cfdi_extractor/facade/batch_processor.py

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple, Union
import time

from cfdi_extractor.aggregation.aggregator import aggregate
from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.exceptions import EmptyBatchError
from cfdi_extractor.extraction.document_parser import DocumentParser, parse_document
from cfdi_extractor.models.cfdi_types import Dataset, ParsedDocument, ParseFailure
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("BatchProcessor")

XmlSource = Tuple[str, Union[bytes, str]]
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RunResult:
    """Resultado de una corrida: dataset agregado más el detalle de fallas"""
    dataset: Dataset
    intentados: int
    exitosos: int
    failures: Tuple[ParseFailure, ...] = field(default_factory=tuple)
    duracion_segundos: float = 0.0

    @property
    def fallidos(self) -> List[str]:
        """Nombres de los archivos que no se pudieron procesar"""
        return [f.nombre_archivo for f in self.failures]

    def require_dataset(self) -> Dataset:
        """
        Devuelve el dataset validando que haya al menos un documento.

        Raises:
            EmptyBatchError: si ningún documento se procesó
        """
        if self.exitosos == 0:
            raise EmptyBatchError(self.intentados)
        return self.dataset


class CfdiBatchProcessor:
    """
    Fachada de procesamiento por lotes.

    Parsea cada documento de forma independiente (en paralelo si
    MAX_WORKERS > 1) y agrega los exitosos en un solo paso secuencial.
    El orden de los documentos en el Dataset es el orden de entrada.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()
        self.parser = DocumentParser(self.settings)

    def _parse_one(self, source: XmlSource) -> Union[ParsedDocument, ParseFailure]:
        nombre, raw = source
        return parse_document(nombre, raw, self.parser)

    def parse_all(
        self,
        sources: Iterable[XmlSource],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[Union[ParsedDocument, ParseFailure]]:
        """
        Parsea todos los documentos preservando el orden de entrada.

        Args:
            sources: Pares (nombre, contenido)
            on_progress: Callback opcional (procesados, total)
        """
        sources = list(sources)
        total = len(sources)
        workers = min(self.settings.MAX_WORKERS, total) if total else 1

        results: List[Union[ParsedDocument, ParseFailure]] = []
        if workers <= 1:
            for outcome in map(self._parse_one, sources):
                results.append(outcome)
                if on_progress:
                    on_progress(len(results), total)
            return results

        with ThreadPoolExecutor(max_workers=workers) as executor:
            # executor.map devuelve en orden de entrada
            for outcome in executor.map(self._parse_one, sources):
                results.append(outcome)
                if on_progress:
                    on_progress(len(results), total)
        return results

    def process(
        self,
        sources: Iterable[XmlSource],
        on_progress: Optional[ProgressCallback] = None,
    ) -> RunResult:
        """
        Procesa un lote completo: parseo por documento + agregación.

        Args:
            sources: Pares (nombre, contenido XML)
            on_progress: Callback opcional (procesados, total)

        Returns:
            RunResult con el Dataset y las fallas por documento
        """
        start_time = time.time()
        outcomes = self.parse_all(sources, on_progress)

        documents = [o for o in outcomes if isinstance(o, ParsedDocument)]
        failures = tuple(o for o in outcomes if isinstance(o, ParseFailure))

        dataset = aggregate(documents, self.settings)
        duracion = round(time.time() - start_time, 3)

        logger.info(
            f"Lote procesado: {len(outcomes)} intentados, {len(documents)} exitosos, "
            f"{len(failures)} fallidos en {duracion}s"
        )
        if failures:
            logger.warning(f"Archivos no procesados: {', '.join(f.nombre_archivo for f in failures)}")

        return RunResult(
            dataset=dataset,
            intentados=len(outcomes),
            exitosos=len(documents),
            failures=failures,
            duracion_segundos=duracion,
        )
