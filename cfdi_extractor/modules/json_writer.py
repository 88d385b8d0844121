# cfdi_extractor/modules/json_writer.py
from __future__ import annotations
import json
from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, TextIO

from cfdi_extractor.models.cfdi_types import Dataset, GlobalSummary, ParsedDocument, ParseFailure
from cfdi_extractor.utils.logger import logger


class DecimalEncoder(json.JSONEncoder):
    """
    Serializa Decimal como string con 2 decimales para precisión monetaria.
    Fechas en ISO-8601 y enums por su valor.
    """
    def default(self, o):
        if isinstance(o, Decimal):
            quant = o.quantize(Decimal("0.01"))
            return format(quant, "f")
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


def document_to_dict(doc: ParsedDocument) -> Dict[str, Any]:
    data = asdict(doc)
    data["tipo"] = doc.document_type.name
    data["conceptos"] = list(data["conceptos"])
    data["montos"]["advertencias"] = list(data["montos"]["advertencias"])
    return data


def summary_to_dict(summary: GlobalSummary) -> Dict[str, Any]:
    # asdict no copia MappingProxyType; se convierten a mano
    return {
        "total_amount": summary.total_amount,
        "total_taxes": summary.total_taxes,
        "total_subtotal": summary.total_subtotal,
        "invoice_count": summary.invoice_count,
        "ingresos_count": summary.ingresos_count,
        "egresos_count": summary.egresos_count,
        "pagos_count": summary.pagos_count,
        "ingresos_total": summary.ingresos_total,
        "egresos_total": summary.egresos_total,
        "pagos_total": summary.pagos_total,
        "date_range": asdict(summary.date_range),
        "by_month": {k: asdict(v) for k, v in summary.by_month.items()},
        "by_tipo": {k: asdict(v) for k, v in summary.by_tipo.items()},
        "advertencias": [asdict(w) for w in summary.advertencias],
    }


def dataset_to_dict(
    dataset: Dataset,
    failures: Iterable[ParseFailure] = (),
) -> Dict[str, Any]:
    """Representación JSON-serializable (con DecimalEncoder) del Dataset."""
    return {
        "summary": summary_to_dict(dataset.summary),
        "documents": [document_to_dict(doc) for doc in dataset.documents],
        "failures": [f.to_dict() for f in failures],
    }


class JSONWriter:
    """
    Encargado de persistir el dataset de una corrida en formato JSON.
    """

    def __init__(self, output_dir: Path = Path("output")):
        self.output_dir = Path(output_dir)

    # --------------------------------------------------------------
    def dump(self, dataset: Dataset, stream: TextIO, failures: Iterable[ParseFailure] = ()) -> None:
        json.dump(
            dataset_to_dict(dataset, failures),
            stream,
            cls=DecimalEncoder,
            ensure_ascii=False,
            indent=2,
        )

    # --------------------------------------------------------------
    def save_dataset(
        self,
        dataset: Dataset,
        filename: str = "dataset.json",
        failures: Iterable[ParseFailure] = (),
    ) -> Optional[Path]:
        """
        Guarda el dataset dentro de output_dir.

        Returns:
            Ruta del archivo escrito, o None si falló la escritura
        """
        path = self.output_dir / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                self.dump(dataset, f, failures)
            logger.info("Dataset guardado en JSON: %s", path)
            return path
        except (OSError, ValueError) as e:
            logger.error("Error guardando dataset en JSON %s: %s", filename, e)
            return None
