"""
Shared fixtures: small VEOs and control files written to tmp_path.
"""

import logging

import pytest

from veo_harvester.config.config_manager import reset_config_manager


VERS_NS = "http://www.prov.vic.gov.au/gservice/standard/pros99007.htm"
NAA_NS = "http://www.naa.gov.au/recordkeeping/control/rkms/contents.jsp"

ENV_VARS = (
    "VEO_HARVESTER_CONTROL_FILE",
    "VEO_HARVESTER_OUTPUT_DIR",
    "VEO_HARVESTER_OUTPUT_FORMAT",
    "VEO_HARVESTER_LOG_LEVEL",
    "VEO_HARVESTER_FILE_EXTENSIONS",
)


def make_veo(title="Report A", date=None, keywords=(), author_role=None):
    """Build a minimal Record VEO as text."""
    keyword_xml = "".join(
        f"<naa:Keyword><naa:KeywordLevel>{word}</naa:KeywordLevel></naa:Keyword>" for word in keywords
    )
    date_xml = f"<naa:Date><naa:DateTimeCreated>{date}</naa:DateTimeCreated></naa:Date>" if date else ""
    role_attr = f' vers:id="{author_role}"' if author_role else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<vers:VERSEncapsulatedObject xmlns:vers="{VERS_NS}" xmlns:naa="{NAA_NS}">\n'
        ' <vers:SignedObject>\n'
        '  <vers:ObjectContent>\n'
        '   <vers:Record>\n'
        '    <vers:RecordMetadata>\n'
        f'     <naa:Title{role_attr}><naa:TitleWords>{title}</naa:TitleWords></naa:Title>\n'
        f'     {date_xml}{keyword_xml}\n'
        '    </vers:RecordMetadata>\n'
        '   </vers:Record>\n'
        '  </vers:ObjectContent>\n'
        ' </vers:SignedObject>\n'
        '</vers:VERSEncapsulatedObject>\n'
    )


@pytest.fixture(autouse=True)
def fresh_config_manager(monkeypatch):
    """Keep the environment, global ConfigManager and CLI log level from leaking between tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()
    logging.getLogger("veo_harvester").setLevel(logging.NOTSET)


@pytest.fixture
def veo_factory():
    return make_veo


@pytest.fixture
def veo_dir(tmp_path):
    """Directory holding two VEOs and one file that is not a VEO."""
    directory = tmp_path / "veos"
    directory.mkdir()
    (directory / "first.veo").write_text(make_veo("Report A", keywords=["Finance"]), encoding="utf-8")
    (directory / "second.xml").write_text(
        make_veo("Report B", date="2001-05-02", keywords=["Audit", "Budget"]), encoding="utf-8")
    (directory / "notes.txt").write_text("not a VEO", encoding="utf-8")
    return directory


@pytest.fixture
def control_file(tmp_path):
    """Control file harvesting title, date, keywords and the file name."""
    path = tmp_path / "fields.txt"
    path.write_text(
        "! Fields harvested from Record VEOs\n"
        "recordVEO/vers:RecordMetadata/naa:Title/naa:TitleWords\tUntitled\tTitle\n"
        "recordVEO/vers:RecordMetadata/naa:Date/naa:DateTimeCreated\n"
        "\n"
        "recordVEO/vers:RecordMetadata/naa:Keyword/naa:KeywordLevel\t\tKeyword\n"
        "x/filename\n",
        encoding="utf-8"
    )
    return path
