from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SAMPLE_CSV = ROOT / "sample-data" / "sample_fcr.csv"

sys.path.insert(0, str(ROOT))

from fcr_parser.batch import build_batch_summary, process_folder
from fcr_parser import __version__
from fcr_parser.contracts import CONTRACT_VERSIONS, build_contract, build_run_summary, contract_fields, utc_now_iso
from fcr_parser.extractor import extract_marks_and_numbers
from fcr_parser.report import build_extraction_payload


class ContractTests(unittest.TestCase):
    def test_every_contract_has_a_version(self):
        for name in CONTRACT_VERSIONS:
            with self.subTest(contract=name):
                contract = build_contract(name)
                self.assertEqual(contract["name"], name)
                self.assertRegex(contract["version"], r"^\d+\.\d+\.\d+$")

    def test_unknown_contract_raises(self):
        with self.assertRaises(KeyError):
            build_contract("fcr_parser.unknown")

    def test_run_summary_fields(self):
        summary = build_run_summary(
            tool="fcr-parser",
            command="extract",
            input_path=SAMPLE_CSV,
            warnings=["one", "two"],
        )
        self.assertEqual(summary["status"], "ok")
        self.assertEqual(summary["input_file"], str(SAMPLE_CSV))
        self.assertIsNone(summary["output_file"])
        self.assertEqual(summary["warnings_count"], 2)
        self.assertEqual(summary["metrics"], {})
        self.assertTrue(summary["generated_at"].endswith("Z"))

    def test_run_summary_lists_each_warning_once(self):
        summary = build_run_summary(
            command="extract",
            input_path=SAMPLE_CSV,
            warnings=["line 3: skipped", "line 3: skipped", "line 9: skipped"],
        )
        self.assertEqual(summary["tool"], "fcr-parser")
        self.assertEqual(summary["warnings"], ["line 3: skipped", "line 9: skipped"])
        self.assertEqual(summary["warnings_count"], 2)

    def test_contract_fields(self):
        fields = contract_fields("fcr_parser.batch_summary")
        self.assertEqual(fields["contract"], {"name": "fcr_parser.batch_summary", "version": "1.0.0"})
        self.assertEqual(fields["schema_version"], "1.0.0")
        self.assertEqual(fields["tool_version"], __version__)

    def test_utc_now_iso_has_no_microseconds(self):
        self.assertRegex(utc_now_iso(), r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

    def test_extraction_payload_emits_versioned_contract_and_run_summary(self):
        payload = build_extraction_payload(SAMPLE_CSV, {"marks": extract_marks_and_numbers(SAMPLE_CSV)})
        self.assertEqual(payload["contract"]["name"], "fcr_parser.extraction")
        self.assertEqual(payload["schema_version"], payload["contract"]["version"])
        self.assertIn("tool_version", payload)
        self.assertEqual(payload["run_summary"]["tool"], "fcr-parser")
        self.assertIn("values_extracted", payload["run_summary"]["metrics"])

    def test_batch_summary_emits_versioned_contract_and_run_summary(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_dir = Path(tmpdir) / "input"
            input_dir.mkdir()
            (input_dir / "sample_fcr.csv").write_bytes(SAMPLE_CSV.read_bytes())
            output_dir = Path(tmpdir) / "output"
            result = process_folder(input_dir, output_dir)
            summary = build_batch_summary(result, input_dir=input_dir, output_dir=output_dir)

        self.assertEqual(summary["contract"]["name"], "fcr_parser.batch_summary")
        self.assertEqual(summary["schema_version"], summary["contract"]["version"])
        self.assertEqual(summary["run_summary"]["command"], "process")
        self.assertEqual(summary["run_summary"]["status"], "ok")
        self.assertEqual(summary["files"], {"total": 1, "successful": 1, "failed": 0})


if __name__ == "__main__":
    unittest.main()
