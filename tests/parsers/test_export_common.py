from leasing_migration.parsers._export_common import decode_block, decode_meta, extract_items, iter_meta_pairs


def _meta(key: str, value: str) -> str:
    return (
        f"<wp:postmeta><wp:meta_key><![CDATA[{key}]]></wp:meta_key>\n"
        f"\t<wp:meta_value><![CDATA[{value}]]></wp:meta_value></wp:postmeta>"
    )


def test_extract_items_drops_prefix_and_truncated_tail():
    document = "<channel><title>x</title><item>one</item>\n<item>two</item>\n<item>three, cut off"
    assert list(extract_items(document)) == ["one", "two"]


def test_extract_items_keeps_last_block_when_terminated():
    document = "<item>a</item><item>b</item>"
    assert list(extract_items(document)) == ["a", "b"]


def test_extract_items_without_markers_is_empty():
    assert list(extract_items("<rss><channel></channel></rss>")) == []
    assert list(extract_items("")) == []


def test_extract_items_is_restartable():
    document = "<item>a</item><item>b</item>"
    items = extract_items(document)
    assert list(items) == ["a", "b"]
    assert list(extract_items(document)) == ["a", "b"]


def test_fixture_counts(vehicle_document, media_document):
    assert len(list(extract_items(vehicle_document))) == 5
    assert len(list(extract_items(media_document))) == 4


def test_decode_block_reads_every_scalar_field():
    block = (
        "<title><![CDATA[Toyota C-HR (2.0) [GR Sport]]]></title>\n"
        "<link>https://dsas.sg-host.com/noleggio/c-hr/</link>\n"
        '<category domain="categoria" nicename="suv"><![CDATA[SUV]]></category>\n'
        '<category domain="marca" nicename="toyota"><![CDATA[TOYOTA]]></category>\n'
        "<wp:post_id>77</wp:post_id>\n"
        "<wp:post_type><![CDATA[noleggiolungotermine]]></wp:post_type>\n"
    )
    item = decode_block(block)
    assert item.title == "Toyota C-HR (2.0) [GR Sport]"
    assert item.link == "https://dsas.sg-host.com/noleggio/c-hr/"
    assert item.brand == "TOYOTA"
    assert item.category == "SUV"
    assert item.post_id == "77"
    assert item.post_type == "noleggiolungotermine"
    assert item.attachment_url is None
    assert item.meta == {}


def test_decode_block_tolerates_missing_and_malformed_fields():
    block = (
        "<title>not cdata</title>\n"
        "<wp:post_id>abc</wp:post_id>\n"
        "<wp:post_type><![CDATA[page]]></wp:post_type>\n"
        + _meta("colore", "Rosso")
    )
    item = decode_block(block)
    assert item.title == ""
    assert item.post_id is None
    assert item.brand == ""
    assert item.post_type == "page"
    assert item.meta == {"colore": "Rosso"}


def test_meta_pairs_repeat_last_wins():
    block = _meta("canone_mensile", "259,90") + _meta("sku", "X") + _meta("canone_mensile", "249,90")
    assert list(iter_meta_pairs(block)) == [("canone_mensile", "259,90"), ("sku", "X"), ("canone_mensile", "249,90")]
    assert decode_meta(block) == {"canone_mensile": "249,90", "sku": "X"}


def test_meta_values_span_lines_and_keep_pattern_characters():
    block = _meta("descrizione", "Riga 1\nRiga 2 (*) [a-z]+ $5.00?")
    assert decode_meta(block) == {"descrizione": "Riga 1\nRiga 2 (*) [a-z]+ $5.00?"}

