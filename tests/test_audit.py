import logging

from autofill_manager.audit import AuditLog


def test_record_appends_lines(audit_path):
    audit = AuditLog(audit_path)
    assert audit.record("DELETE_RECORD", "table=autofill name=email")
    assert audit.record("DELETE_RECORD_NO_MATCH", "table=autofill name=city")
    with open(audit_path, encoding='utf-8') as f:
        lines = f.read().splitlines()
    assert [line.split(" | ", 1)[1] for line in lines] == [
        "DELETE_RECORD | table=autofill name=email",
        "DELETE_RECORD_NO_MATCH | table=autofill name=city",
    ]


def test_write_failure_is_logged_not_raised(tmp_path, caplog):
    # the log path is a directory, so opening it for append fails
    audit = AuditLog(str(tmp_path))
    with caplog.at_level(logging.WARNING, logger="autofill_manager.audit"):
        assert audit.record("DELETE_RECORD", "x") is False
    assert "Could not write audit log" in caplog.text
