"""
Keyword families for document classification (English/Spanish).

This is data, not logic. A rules file can replace it wholesale
(see doc_journal.rules). Family order matters: it is the tie-break
when several families match.
"""

from dataclasses import dataclass, field
from typing import Mapping

from ..schemas.document import DocumentType


@dataclass(frozen=True)
class KeywordFamily:
    """Keywords for one document type, split by where they are searched."""

    document_type: DocumentType
    file_name: tuple[str, ...] = ()
    text: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassifierKeywords:
    """Ordered keyword families. All keywords are lowercase."""

    families: tuple[KeywordFamily, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, list[str]]]) -> "ClassifierKeywords":
        """
        Build from a mapping like::

            {"INVOICE": {"file_name": ["invoice"], "text": ["invoice"]}}

        Mapping order becomes family order.
        """
        families = []
        for type_name, groups in data.items():
            families.append(
                KeywordFamily(
                    document_type=DocumentType(type_name.upper()),
                    file_name=tuple(kw.lower() for kw in groups.get("file_name", [])),
                    text=tuple(kw.lower() for kw in groups.get("text", [])),
                )
            )
        return cls(families=tuple(families))


DEFAULT_KEYWORDS = ClassifierKeywords(
    families=(
        KeywordFamily(
            document_type=DocumentType.INVOICE,
            file_name=("invoice", "factura", "inv-", "inv_"),
            text=("invoice", "factura", "inv-", "bill to", "facturar a"),
        ),
        KeywordFamily(
            document_type=DocumentType.RECEIPT,
            file_name=("receipt", "recibo", "ticket"),
            text=("receipt", "recibo", "cashier", "cajero", "change due", "su cambio"),
        ),
        KeywordFamily(
            document_type=DocumentType.BANK_STATEMENT,
            file_name=("bank-statement", "bank_statement", "statement", "estado-de-cuenta",
                       "estado_de_cuenta", "estado-cuenta"),
            text=("bank statement", "statement", "estado de cuenta", "beginning balance",
                  "ending balance", "saldo inicial", "saldo final"),
        ),
    )
)
