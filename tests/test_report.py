import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fcr_parser import __version__
from fcr_parser.report import (
    build_extraction_payload,
    format_property_name,
    render_text,
    write_extraction_outputs,
)


class PayloadTests(unittest.TestCase):
    def test_columns_use_pascal_case_keys(self):
        payload = build_extraction_payload(
            Path("receipt.csv"),
            {"marks": ["1659", "---", "PO 4471"], "cargo": ["BEDDING"]},
            warnings=["line 9: skipped malformed record (field larger than field limit (131072))"],
        )

        self.assertEqual(payload["MarksAndNumbers"], ["1659", "---", "PO 4471"])
        self.assertEqual(payload["CargoDescription"], ["BEDDING"])
        self.assertEqual(payload["contract"], {"name": "fcr_parser.extraction", "version": "1.0.0"})
        self.assertEqual(payload["schema_version"], "1.0.0")
        self.assertEqual(payload["tool_version"], __version__)

        summary = payload["run_summary"]
        self.assertEqual(summary["command"], "extract")
        self.assertEqual(summary["input_file"], "receipt.csv")
        self.assertEqual(summary["warnings_count"], 1)
        self.assertEqual(summary["metrics"]["values_extracted"], {"MarksAndNumbers": 3, "CargoDescription": 1})

    def test_unknown_group_names_pass_through(self):
        payload = build_extraction_payload(Path("r.csv"), {"Remarks": ["A"]})
        self.assertEqual(payload["Remarks"], ["A"])


class RenderTextTests(unittest.TestCase):
    def test_property_names_are_spaced(self):
        self.assertEqual(format_property_name("MarksAndNumbers"), "Marks And Numbers")
        self.assertEqual(format_property_name("cargoDescription"), "Cargo Description")
        self.assertEqual(format_property_name(""), "")

    def test_sections_list_values_one_per_line(self):
        payload = build_extraction_payload(
            Path("receipt.csv"),
            {"marks": ["1659", "---", "PO 4471"], "cargo": []},
        )
        text = render_text(payload)

        self.assertEqual(
            text,
            "Marks And Numbers:\n1659\n---\nPO 4471\n\nCargo Description:\n\n",
        )
        self.assertNotIn("contract", text)
        self.assertNotIn("run_summary", text)

    def test_nested_and_scalar_values(self):
        text = render_text({"ShipperInfo": {"name": "ACME", "code": None}, "Pages": 2})
        self.assertEqual(text, "Shipper Info:\n  name: ACME\n  code: N/A\n\nPages:\n2\n\n")

    def test_empty_payload_renders_nothing(self):
        self.assertEqual(render_text({}), "")


class OutputFileTests(unittest.TestCase):
    def test_json_and_text_are_written(self):
        payload = build_extraction_payload(Path("receipt.csv"), {"cargo": ["ÇAY BARDAĞI"]})
        with tempfile.TemporaryDirectory() as tmpdir:
            outputs = write_extraction_outputs(payload, Path(tmpdir) / "nested", "receipt")

            json_text = Path(outputs["json"]).read_text(encoding="utf-8")
            self.assertIn("ÇAY BARDAĞI", json_text)
            self.assertEqual(json.loads(json_text)["CargoDescription"], ["ÇAY BARDAĞI"])
            self.assertEqual(
                Path(outputs["text"]).read_text(encoding="utf-8"),
                "Cargo Description:\nÇAY BARDAĞI\n\n",
            )
            self.assertTrue(outputs["json"].endswith("receipt.json"))


if __name__ == "__main__":
    unittest.main()
