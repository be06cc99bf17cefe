"""Keyword heuristics used as the last suggestion layer."""

from typing import Sequence

from euer.domain.entities import ClassificationCandidate, FlowType, LineDefinition, Suggestion

# (substrings, Kennziffer, reason); first matching category wins
INCOME_KEYWORDS = [
    (("steuererstattung", "erstattung umsatzsteuer"), "141", "Steuererstattung erkannt"),
    (("umsatzsteuer", "ust"), "140", "USt-Hinweis erkannt"),
]
INCOME_DEFAULT = ("112", "Standard Betriebseinnahme")

EXPENSE_KEYWORDS = [
    (("miete", "pacht", "cowork"), "150", "Miete/Pacht erkannt"),
    (("telefon", "internet", "hosting", "domain"), "280", "Telekommunikation erkannt"),
    (("software", "saas", "lizenz", "cloud"), "228", "EDV-Kosten erkannt"),
    (("steuerberater", "buchhaltung", "anwalt", "rechtsanwalt"), "194", "Beratungsleistung erkannt"),
    (("google ads", "facebook ads", "werbung", "marketing"), "224", "Werbung/Marketing erkannt"),
    (("hotel", "reise", "bahn", "flug"), "221", "Reisekosten erkannt"),
    (("kfz", "tank", "diesel", "parken"), "146", "Kfz/Fahrtkosten erkannt"),
    (("versicherung", "beitrag", "gebuehr", "gebuhr"), "223", "Gebuehren/Versicherungen erkannt"),
    (("zins", "kredit"), "234", "Zinsen erkannt"),
    (("vorsteuer",), "185", "Vorsteuer erkannt"),
]
EXPENSE_DEFAULT = ("183", "Sonstige Betriebsausgabe als Fallback")

_UMLAUTS = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})


def normalize_keyword_text(value: str) -> str:
    """Lower-case and transliterate German umlauts."""
    return value.lower().translate(_UMLAUTS)


def suggest_by_keywords(
    candidate: ClassificationCandidate, lines: Sequence[LineDefinition]
) -> Suggestion:
    """Suggest a line from fixed keyword lists, falling back to a default line.

    Lines are addressed by Kennziffer, so a catalog lacking the Kennziffer
    yields an empty suggestion.
    """
    text = normalize_keyword_text(f"{candidate.counterparty} {candidate.purpose}")
    by_kennziffer = {line.kennziffer: line.id for line in lines if line.kennziffer}

    if FlowType(candidate.flow_type) == FlowType.INCOME:
        keywords, default = INCOME_KEYWORDS, INCOME_DEFAULT
    else:
        keywords, default = EXPENSE_KEYWORDS, EXPENSE_DEFAULT

    kennziffer, reason = default
    for needles, kz, kz_reason in keywords:
        if any(needle in text for needle in needles):
            kennziffer, reason = kz, kz_reason
            break

    line_id = by_kennziffer.get(kennziffer)
    if line_id is None:
        return Suggestion()
    return Suggestion(line_id=line_id, reason=reason)
