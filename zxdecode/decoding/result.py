"""Decoded symbol value type and the symbology enumeration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Symbology(str, Enum):
    AZTEC = "aztec"
    CODABAR = "codabar"
    CODE_39 = "code_39"
    CODE_93 = "code_93"
    CODE_128 = "code_128"
    DATA_MATRIX = "data_matrix"
    EAN_8 = "ean_8"
    EAN_13 = "ean_13"
    ITF = "itf"
    MAXICODE = "maxicode"
    PDF_417 = "pdf_417"
    QR_CODE = "qr_code"
    RSS_14 = "rss_14"
    RSS_EXPANDED = "rss_expanded"
    UPC_A = "upc_a"
    UPC_E = "upc_e"
    UPC_EAN_EXTENSION = "upc_ean_extension"
    UNKNOWN = "unknown"


# zxing-cpp format names. Anything missing here decodes as UNKNOWN.
_ENGINE_FORMATS: dict[str, Symbology] = {
    "Aztec": Symbology.AZTEC,
    "Codabar": Symbology.CODABAR,
    "Code39": Symbology.CODE_39,
    "Code93": Symbology.CODE_93,
    "Code128": Symbology.CODE_128,
    "DataMatrix": Symbology.DATA_MATRIX,
    "EAN8": Symbology.EAN_8,
    "EAN13": Symbology.EAN_13,
    "ITF": Symbology.ITF,
    "MaxiCode": Symbology.MAXICODE,
    "PDF417": Symbology.PDF_417,
    "QRCode": Symbology.QR_CODE,
    "DataBar": Symbology.RSS_14,
    "DataBarExpanded": Symbology.RSS_EXPANDED,
    "UPCA": Symbology.UPC_A,
    "UPCE": Symbology.UPC_E,
}


def symbology_for(engine_format: Any) -> Symbology:
    """Map an engine-native barcode format to a Symbology.

    Accepts the engine's enum member or its name. Never raises: formats the
    table does not know about map to ``Symbology.UNKNOWN``.
    """
    name = getattr(engine_format, "name", engine_format)
    if not isinstance(name, str):
        return Symbology.UNKNOWN
    return _ENGINE_FORMATS.get(name, Symbology.UNKNOWN)


@dataclass(frozen=True)
class Result:
    symbology: Symbology | None
    text: str | None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "symbology": self.symbology.value if self.symbology is not None else None,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result:
        raw = data.get("symbology")
        symbology = None
        if raw is not None:
            try:
                symbology = Symbology(raw)
            except ValueError:
                symbology = Symbology.UNKNOWN
        return cls(symbology=symbology, text=data.get("text"))
