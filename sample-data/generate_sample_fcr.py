#!/usr/bin/env python3
"""
generate_sample_fcr.py

Generates sample-data/sample_fcr.csv — a forwarder's cargo receipt exported
from a spreadsheet template, with the usual artifacts:

  - a decorative row of x filler above everything else
  - a shipper block sitting to the right of the table
  - merged header cells exported as blank neighbours
  - two blank rows used as a visual section break
  - a multi-line cell flattened onto one line with a double space
  - a page-break banner and a repeated "continued" heading mid-table

Run: python sample-data/generate_sample_fcr.py
"""

from pathlib import Path

OUT = Path(__file__).parent / "sample_fcr.csv"

lines = [
    "x,x,x,x,x,x,x,x",
    ",,,,,FORWARDERS RECEIPT,,",
    ",,,,,Shipper,ACME HOME LINENS LTD,",
    ",,,,,,12 HARBOUR ROAD CHATTOGRAM,",
    ",,,,,S/O No,SO-88231,",
    "Marks & Numbers,,Cargo Description,,,Gross Weight,,CBM",
    "1659,,BEDDING,,,1200 KGS,,4.5",
    "CARTONS,,100%Cotton Bed Sheets,,,,,",
    ",,,,,,,",
    ",,,,,,,",
    'PO 4471,,"NET WEIGHT :-  11619.132 KGS",,,,,',
    "CONTINUE ON NEXT PAGE,,,,,,,",
    "Marks and Numbers / Description continued,,,,,,,",
    "MADE IN BANGLADESH,,PILLOW CASES,,,,,",
    ",,,,,,,",
    "Freight Collect,,,,,,,",
]

OUT.write_text("\n".join(lines) + "\n", encoding="utf-8")
print(f"Created: {OUT}")
