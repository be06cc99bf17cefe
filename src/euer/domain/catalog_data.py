"""Static EÜR line definitions per tax year.

Each entry is (kennziffer, label, kind, exportable, computed_from_kennziffern).
Ids are derived as ``E<year>_KZ<kennziffer>``; lines without an official
Kennziffer carry an explicit id instead of a code.
"""

EUR_SOURCE_VERSION_2025 = "BMF-2025-2025-08-29"


LINES_2025 = [
    # Betriebseinnahmen
    ("111", "Betriebseinnahmen als umsatzsteuerlicher Kleinunternehmer", "income", True, ()),
    ("112", "Umsatzsteuerpflichtige Betriebseinnahmen", "income", True, ()),
    ("103", "Umsatzsteuerfreie, nicht umsatzsteuerbare Betriebseinnahmen", "income", True, ()),
    ("104", "Betriebseinnahmen nach § 19 Abs. 3 UStG", "income", True, ()),
    ("140", "Vereinnahmte Umsatzsteuer sowie Umsatzsteuer auf unentgeltliche Wertabgaben", "income", True, ()),
    ("141", "Vom Finanzamt erstattete und ggf. verrechnete Umsatzsteuer", "income", True, ()),
    ("102", "Veräußerung oder Entnahme von Anlagevermögen", "income", True, ()),
    ("106", "Private Kfz-Nutzung", "income", True, ()),
    (
        "159",
        "Summe Betriebseinnahmen",
        "computed",
        True,
        ("111", "112", "103", "104", "140", "141", "102", "106"),
    ),
    # Betriebsausgaben
    ("100", "Waren, Rohstoffe und Hilfsstoffe einschließlich Nebenkosten", "expense", True, ()),
    ("110", "Bezogene Fremdleistungen", "expense", True, ()),
    ("120", "Ausgaben für eigenes Personal", "expense", True, ()),
    ("136", "AfA auf bewegliche Wirtschaftsgüter", "expense", True, ()),
    ("150", "Miete/Pacht für Geschäftsräume und betriebliche Grundstücke", "expense", True, ()),
    ("280", "Aufwendungen für Telekommunikation", "expense", True, ()),
    ("228", "Aufwendungen für EDV, Software und Lizenzen", "expense", True, ()),
    ("194", "Rechts- und Steuerberatung, Buchführung", "expense", True, ()),
    ("224", "Werbe- und Marketingkosten", "expense", True, ()),
    ("221", "Übernachtungs- und Reisenebenkosten bei Geschäftsreisen", "expense", True, ()),
    ("146", "Kfz-Kosten und Fahrtkosten", "expense", True, ()),
    ("223", "Beiträge, Gebühren, Abgaben und Versicherungen", "expense", True, ()),
    ("234", "Schuldzinsen", "expense", True, ()),
    ("185", "Gezahlte Vorsteuerbeträge", "expense", True, ()),
    ("186", "An das Finanzamt gezahlte und ggf. verrechnete Umsatzsteuer", "expense", True, ()),
    ("183", "Übrige unbeschränkt abziehbare Betriebsausgaben", "expense", True, ()),
    # Internal subtotal, not part of the official form
    ("E2025_SUB_MOBILITY", "Zwischensumme Reise- und Fahrtkosten", "computed", False, ("221", "146")),
    ("E2025_SUB_TAXES", "Zwischensumme Umsatzsteuer", "computed", False, ("185", "186")),
    (
        "199",
        "Summe Betriebsausgaben",
        "computed",
        True,
        (
            "100", "110", "120", "136", "150", "280", "228", "194", "224",
            "E2025_SUB_MOBILITY", "223", "234", "E2025_SUB_TAXES", "183",
        ),
    ),
]


CATALOG_SOURCES = {
    2025: (EUR_SOURCE_VERSION_2025, LINES_2025),
}
