"""Tests for backup_reader module."""
import pytest

from xml_backup.backup_item import MESSAGE_TYPE_INBOX, MESSAGE_TYPE_SENT, SmsItem
from xml_backup.backup_reader import XmlBackupReader, parse_integer
from xml_backup.errors import BackupFormatError, BackupParseError

SAMPLE_SMS_XML = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<!-- File Created By SMS Backup & Restore -->
<smses count="3">
  <sms protocol="0" address="+1234567890" date="1609459200000" type="1"
       subject="null" body="Hello, this is a test message"
       toa="null" sc_toa="null" service_center="+1222333444" read="1"
       status="-1" locked="0" readable_date="Jan 1, 2021 12:00:00 AM"
       contact_name="John Doe" sub_id="-1" />
  <mms date="1609459260000" address="+1234567890" msg_box="1" read="1">
    <parts>
      <part seq="0" ct="text/plain" text="MMS text is not read" />
    </parts>
  </mms>
  <sms protocol="0" address="+1234567890" date="1609545600000" type="2"
       body="Tom &amp; &quot;Jerry&quot; &lt;3&#10;&#128512;" read="0" status="32" />
</smses>"""


def write_backup(temp_dir, content, name="sms-test.xml"):
    path = temp_dir / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestXmlBackupReader:
    """Tests for the XmlBackupReader class."""

    def test_reads_sms_items_in_order(self, temp_dir):
        """Test that every <sms> element becomes an item, in document order."""
        path = write_backup(temp_dir, SAMPLE_SMS_XML)

        with XmlBackupReader(path) as reader:
            first = reader.get_next()
            second = reader.get_next()
            assert reader.get_next() is None

        assert first == SmsItem(
            protocol=0, address="+1234567890", date=1609459200000, type=MESSAGE_TYPE_INBOX,
            subject="null", body="Hello, this is a test message",
            service_center="+1222333444", read=1, status=-1,
        )
        assert second.type == MESSAGE_TYPE_SENT
        assert second.read == 0
        assert second.status == 32

    def test_values_are_unescaped(self, temp_dir):
        """Test that entities and character references are decoded."""
        path = write_backup(temp_dir, SAMPLE_SMS_XML)

        with XmlBackupReader(path) as reader:
            items = list(reader)

        assert items[1].body == 'Tom & "Jerry" <3\n\U0001F600'

    def test_missing_attributes_keep_defaults(self, temp_dir):
        """Test that absent text attributes stay None and integers stay 0."""
        path = write_backup(temp_dir, SAMPLE_SMS_XML)

        with XmlBackupReader(path) as reader:
            items = list(reader)

        assert items[1].subject is None
        assert items[1].service_center is None
        assert items[1].protocol == 0

    def test_mms_elements_are_not_returned(self, temp_dir):
        """Test that only <sms> elements are read."""
        path = write_backup(temp_dir, SAMPLE_SMS_XML)

        with XmlBackupReader(path) as reader:
            items = list(reader)

        assert len(items) == 2
        assert reader.items_read == 2

    def test_tag_match_is_case_insensitive(self, temp_dir):
        """Test that <SMS> and <Sms> elements are read."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="2">
  <SMS address="111" body="upper" />
  <Sms address="222" body="mixed" />
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            bodies = [item.body for item in reader]

        assert bodies == ["upper", "mixed"]

    def test_element_without_attributes_is_skipped(self, temp_dir):
        """Test that an attribute-less <sms/> is skipped and reading continues."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="3">
  <sms />
  <sms></sms>
  <sms address="+1555" body="after the empty ones" />
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            item = reader.get_next()
            assert reader.get_next() is None

        assert item.body == "after the empty ones"

    def test_unknown_attributes_are_ignored(self, temp_dir):
        """Test that attributes outside the known set are ignored."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="1">
  <sms address="+1555" contact_name="Alice" sub_id="abc" body="hi" />
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            item = reader.get_next()

        assert item == SmsItem(address="+1555", body="hi")

    def test_exhausted_reader_keeps_returning_none(self, temp_dir):
        """Test that get_next() after the end returns None instead of raising."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="0">
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            for _ in range(3):
                assert reader.get_next() is None
            assert list(reader) == []

    @pytest.mark.parametrize("attribute,value", [
        ("protocol", "zero"),
        ("date", "1609459200000.5"),
        ("type", ""),
        ("read", " 1"),
        ("status", "1_0"),
        ("type", "2147483648"),
        ("date", "9223372036854775808"),
    ])
    def test_malformed_integer_aborts_read(self, temp_dir, attribute, value):
        """Test that a bad numeric attribute raises BackupFormatError."""
        content = f"""<?xml version="1.0" encoding="UTF-8"?>
<smses count="1">
  <sms address="+1555" body="hi" {attribute}="{value}" />
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            with pytest.raises(BackupFormatError):
                reader.get_next()

    def test_malformed_xml_raises_parse_error(self, temp_dir):
        """Test that mismatched tags raise BackupParseError."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="1">
  <mms></sms>
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            with pytest.raises(BackupParseError):
                reader.get_next()

    def test_control_character_references_are_read(self, temp_dir):
        """Test that references to control characters come back as the characters."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<smses count="1">
  <sms address="&#1;+1555" body="a&#1;b nul&#0; &#x1B;[0m &#9;" type="1" />
</smses>"""
        path = write_backup(temp_dir, content)

        with XmlBackupReader(path) as reader:
            item = reader.get_next()

        assert item.address == "\x01+1555"
        assert item.body == "a\x01b nul\x00 \x1b[0m \t"
        assert item.type == MESSAGE_TYPE_INBOX

    def test_invalid_utf8_raises_parse_error(self, temp_dir):
        """Test that bytes which are not UTF-8 raise BackupParseError."""
        path = temp_dir / "sms-test.xml"
        path.write_bytes(b'<?xml version="1.0" encoding="UTF-8"?>\n'
                         b'<smses count="1"><sms body="\xff\xfe" /></smses>')

        with XmlBackupReader(str(path)) as reader:
            with pytest.raises(BackupParseError):
                reader.get_next()

    def test_missing_file_raises_os_error(self, temp_dir):
        """Test that a missing file fails at construction."""
        with pytest.raises(FileNotFoundError):
            XmlBackupReader(str(temp_dir / "does-not-exist.xml"))

    def test_close_releases_stream(self, temp_dir):
        """Test that leaving the with block closes the input file."""
        path = write_backup(temp_dir, SAMPLE_SMS_XML)

        with XmlBackupReader(path) as reader:
            reader.get_next()

        assert reader._stream.closed


class TestParseInteger:
    """Tests for the parse_integer function."""

    def test_signed_values(self):
        """Test that an optional sign is accepted."""
        assert parse_integer("status", "-1") == -1
        assert parse_integer("status", "+5") == 5
        assert parse_integer("status", "007") == 7

    def test_int32_bounds(self):
        """Test the default 32-bit range limits."""
        assert parse_integer("type", "2147483647") == 2147483647
        assert parse_integer("type", "-2147483648") == -2147483648
        with pytest.raises(BackupFormatError):
            parse_integer("type", "-2147483649")

    def test_non_ascii_digits_rejected(self):
        """Test that Unicode digits int() would accept are rejected."""
        with pytest.raises(BackupFormatError):
            parse_integer("read", "\u0661")
