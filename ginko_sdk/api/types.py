"""OpenFIGI mapping types."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .error import DeserializeError


@dataclass
class MappingJob:
    """One entry of an OpenFIGI mapping request."""

    id_type: str
    id_value: str
    props: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize for the request body, translating ``.`` to ``/``.

        OpenFIGI writes share-class suffixes with a slash (``BRK/B``) where
        exchanges use a dot (``BRK.B``).
        """
        return {
            "idType": self.id_type,
            "idValue": self.id_value.replace(".", "/", 1),
            **self.props,
        }


@dataclass
class FigiItem:
    """A security record returned by the OpenFIGI mapping API."""

    figi: str
    security_type: Optional[str] = None
    market_sector: Optional[str] = None
    ticker: Optional[str] = None
    name: Optional[str] = None
    exch_code: Optional[str] = None
    share_class_figi: Optional[str] = None
    composite_figi: Optional[str] = None
    security_type2: Optional[str] = None
    security_description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FigiItem":
        """Create from an API record, restoring ``/`` in tickers to ``.``."""
        try:
            ticker = data.get("ticker")
            return cls(
                figi=data["figi"],
                security_type=data.get("securityType"),
                market_sector=data.get("marketSector"),
                ticker=ticker.replace("/", ".", 1) if ticker else None,
                name=data.get("name"),
                exch_code=data.get("exchCode"),
                share_class_figi=data.get("shareClassFIGI"),
                composite_figi=data.get("compositeFIGI"),
                security_type2=data.get("securityType2"),
                security_description=data.get("securityDescription"),
            )
        except KeyError as e:
            raise DeserializeError(f"Missing required field in FigiItem: {e}")
        except (TypeError, AttributeError) as e:
            raise DeserializeError(f"Malformed FigiItem: {e}")
