"""
End-to-end harvesting tests.

These tests run the command line entry point over a small collection of
File, Record and revised Record VEOs and check the output in every format,
both grouped into one file and written per VEO.
"""

import json
import os
import tempfile
import unittest

from pathlib import Path
from unittest.mock import patch

from lxml import etree

from veo_harvester.cli import main
from veo_harvester.config.config_manager import reset_config_manager


NAMESPACES = (
    'xmlns:vers="http://www.prov.vic.gov.au/gservice/standard/pros99007.htm" '
    'xmlns:naa="http://www.naa.gov.au/recordkeeping/control/rkms/contents.jsp"'
)

RECORD_VEO = f"""<?xml version="1.0" encoding="UTF-8"?>
<vers:VERSEncapsulatedObject {NAMESPACES}>
 <vers:SignedObject>
  <vers:ObjectContent>
   <vers:Record>
    <vers:RecordMetadata>
     <naa:Title vers:id="t1"><naa:TitleWords>Minutes &amp; Agenda</naa:TitleWords></naa:Title>
     <naa:Keyword><naa:KeywordLevel>Council</naa:KeywordLevel></naa:Keyword>
     <naa:Keyword><naa:KeywordLevel>Meetings, 2001</naa:KeywordLevel></naa:Keyword>
    </vers:RecordMetadata>
   </vers:Record>
  </vers:ObjectContent>
 </vers:SignedObject>
</vers:VERSEncapsulatedObject>
"""

REVISED_VEO = f"""<?xml version="1.0" encoding="UTF-8"?>
<vers:VERSEncapsulatedObject {NAMESPACES}>
 <vers:SignedObject>
  <vers:ObjectContent>
   <vers:ModifiedVEO>
    <vers:RevisedVEO>
     <vers:SignedObject>
      <vers:ObjectContent>
       <vers:Record>
        <vers:RecordMetadata>
         <naa:Title><naa:TitleWords>Revised plan</naa:TitleWords></naa:Title>
         <naa:Date><naa:DateTimeCreated>2002-07-15</naa:DateTimeCreated></naa:Date>
        </vers:RecordMetadata>
       </vers:Record>
      </vers:ObjectContent>
     </vers:SignedObject>
    </vers:RevisedVEO>
   </vers:ModifiedVEO>
  </vers:ObjectContent>
 </vers:SignedObject>
</vers:VERSEncapsulatedObject>
"""

FILE_VEO = f"""<?xml version="1.0" encoding="UTF-8"?>
<vers:VERSEncapsulatedObject {NAMESPACES}>
 <vers:SignedObject>
  <vers:ObjectContent>
   <vers:File>
    <vers:FileMetadata>
     <naa:Title><naa:TitleWords>Planning file</naa:TitleWords></naa:Title>
    </vers:FileMetadata>
   </vers:File>
  </vers:ObjectContent>
 </vers:SignedObject>
</vers:VERSEncapsulatedObject>
"""

CONTROL_FILE = (
    "! Title from any VEO, date and keywords from Record VEOs\n"
    "VEOMetadata/naa:Title/naa:TitleWords\tUntitled\tTitle\n"
    "recordVEO/vers:RecordMetadata/naa:Date/naa:DateTimeCreated\tundated\tDate\n"
    "recordVEO/vers:RecordMetadata/naa:Keyword/naa:KeywordLevel\tnone\tKeyword\n"
    "x/filename\n"
)


class TestHarvestEndToEnd(unittest.TestCase):
    """Harvest a directory of VEOs through the command line entry point."""

    def setUp(self):
        """Set up test environment."""
        reset_config_manager()

        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

        self.veo_dir = self.temp_path / "veos"
        (self.veo_dir / "2002").mkdir(parents=True)
        (self.veo_dir / "a_record.veo").write_text(RECORD_VEO, encoding="utf-8")
        (self.veo_dir / "2002" / "b_revised.veo").write_text(REVISED_VEO, encoding="utf-8")
        (self.veo_dir / "c_file.xml").write_text(FILE_VEO, encoding="utf-8")
        (self.veo_dir / "readme.txt").write_text("ignored", encoding="utf-8")

        self.control_file = self.temp_path / "fields.txt"
        self.control_file.write_text(CONTROL_FILE, encoding="utf-8")

        self.out_dir = self.temp_path / "out"
        self.out_dir.mkdir()

    def tearDown(self):
        """Clean up test environment."""
        reset_config_manager()
        self.temp_dir.cleanup()

    def harvest(self, *options):
        return main(["-cf", str(self.control_file), "-od", str(self.out_dir), *options, str(self.veo_dir)])

    def test_grouped_xml_is_well_formed(self):
        """Test grouped XML output parses and holds one Report per VEO."""
        self.assertEqual(self.harvest("--xml", "-o", "all.xml"), 0)

        root = etree.parse(str(self.out_dir / "all.xml")).getroot()
        self.assertEqual(root.tag, "report")
        reports = root.findall("Report")
        self.assertEqual(len(reports), 3)

        # directories are walked in sorted order: 2002/, a_record.veo, c_file.xml
        self.assertEqual([r.findtext("Title") for r in reports],
                         ["Revised plan", "Minutes & Agenda", "Planning file"])
        self.assertEqual([r.findtext("Date") for r in reports], ["2002-07-15", "undated", "undated"])
        self.assertEqual([k.text for k in reports[1].findall("Keyword")], ["Council", "Meetings, 2001"])
        self.assertEqual(reports[1].findtext("filename"), "a_record.veo")

    def test_grouped_json_is_valid(self):
        """Test grouped JSON output is a single valid document."""
        self.assertEqual(self.harvest("--json", "-o", "all.json"), 0)

        data = json.loads((self.out_dir / "all.json").read_text(encoding="utf-8"))
        reports = data["report"]
        self.assertEqual(len(reports), 3)
        self.assertEqual(reports[0], {"Title": "Revised plan", "Date": "2002-07-15",
                                      "Keyword": "none", "filename": "b_revised.veo"})
        self.assertEqual(reports[1]["Title"], "Minutes & Agenda")
        self.assertEqual(reports[1]["Keyword"], [{"Council": "null"}, {"Meetings, 2001": "null"}])

    def test_per_document_csv(self):
        """Test one CSV file per VEO, named after the VEO."""
        self.assertEqual(self.harvest("--csv"), 0)

        self.assertEqual(sorted(p.name for p in self.out_dir.iterdir()),
                         ["a_record.csv", "b_revised.csv", "c_file.csv"])
        self.assertEqual(
            (self.out_dir / "a_record.csv").read_text(encoding="utf-8"),
            'Title,Date,Keyword,filename\nMinutes & Agenda,undated,Council$$"Meetings, 2001",a_record.veo\n'
        )

    def test_grouped_tsv(self):
        """Test TSV leaves commas unquoted."""
        self.assertEqual(self.harvest("--tsv", "-o", "all.tsv"), 0)

        lines = (self.out_dir / "all.tsv").read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines[0], "Title\tDate\tKeyword\tfilename")
        self.assertEqual(lines[2], "Minutes & Agenda\tundated\tCouncil$$Meetings, 2001\ta_record.veo")
        self.assertEqual(len(lines), 4)

    @patch.dict(os.environ, {
        'VEO_HARVESTER_OUTPUT_FORMAT': 'json',
        'VEO_HARVESTER_FILE_EXTENSIONS': '.veo'
    })
    def test_environment_configuration(self):
        """Test the output format and VEO extensions come from the environment."""
        self.assertEqual(self.harvest("-o", "env.out"), 0)

        data = json.loads((self.out_dir / "env.out").read_text(encoding="utf-8"))
        self.assertEqual([r["filename"] for r in data["report"]], ["b_revised.veo", "a_record.veo"])

    def test_malformed_veo_is_skipped(self):
        """Test a broken VEO is reported and the rest still harvested."""
        (self.veo_dir / "b_broken.veo").write_text(RECORD_VEO[:200], encoding="utf-8")

        with self.assertLogs("veo_harvester", level="WARNING") as logs:
            self.assertEqual(self.harvest("--json", "-o", "all.json"), 0)

        self.assertTrue(any("b_broken.veo" in line for line in logs.output))
        data = json.loads((self.out_dir / "all.json").read_text(encoding="utf-8"))
        self.assertEqual(len(data["report"]), 3)

    def test_nested_xml(self):
        """Test nested output reproduces the captured subtrees."""
        self.control_file.write_text("recordVEO/vers:RecordMetadata/naa:Keyword\n", encoding="utf-8")

        self.assertEqual(self.harvest("--xml", "--nested"), 0)

        self.assertEqual(
            (self.out_dir / "a_record.xml").read_text(encoding="utf-8"),
            '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>\n'
            "<report>\n"
            "<Report>\n"
            " <naa:Keyword>\n"
            "  <naa:KeywordLevel>Council</naa:KeywordLevel>\n"
            " </naa:Keyword>\n"
            " <naa:Keyword>\n"
            "  <naa:KeywordLevel>Meetings, 2001</naa:KeywordLevel>\n"
            " </naa:Keyword>\n"
            "</Report>\n"
            "</report>\n"
        )
        self.assertEqual((self.out_dir / "c_file.xml").read_text(encoding="utf-8").count("<Report/>"), 1)


if __name__ == '__main__':
    unittest.main()
