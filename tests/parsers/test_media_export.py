from leasing_migration.parsers.media_export import build_media_index


def test_build_media_index_maps_attachments_only(media_document):
    index = build_media_index(media_document)
    assert index == {
        "101": "https://dsas.sg-host.com/wp-content/uploads/2024/03/toyota yaris cross.jpg",
        "102": "https://dsas.sg-host.com/wp-content/uploads/2024/03/fiat-500e.png",
    }


def test_build_media_index_last_wins_for_repeated_ids():
    document = (
        "<item><wp:post_id>5</wp:post_id><wp:post_type><![CDATA[attachment]]></wp:post_type>"
        "<wp:attachment_url><![CDATA[http://x/old.jpg]]></wp:attachment_url></item>"
        "<item><wp:post_id>5</wp:post_id><wp:post_type><![CDATA[attachment]]></wp:post_type>"
        "<wp:attachment_url><![CDATA[http://x/new.jpg]]></wp:attachment_url></item>"
    )
    assert build_media_index(document) == {"5": "http://x/new.jpg"}


def test_build_media_index_empty_document():
    assert build_media_index("") == {}


def test_build_media_index_logs_counts(media_document, caplog):
    caplog.set_level("INFO", logger="leasing_migration.parsers.media_export")
    build_media_index(media_document)
    assert "scanned items=4 attachments=2" in caplog.text
