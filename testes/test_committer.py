import pytest
from conftest import FakeDownloader, image_bytes, make_record

from wxr_importer.importers import (
    FIXME_MARKER,
    ImageCache,
    ImageLocalizer,
    ImportSelection,
    build_manifest,
    clear_registered_meta_keys,
    commit_manifest,
    import_meta_keys,
    register_meta_key,
)
from wxr_importer.importers.committer import DEFAULT_META_KEYS, maybe_unserialize
from wxr_importer.models import WxrExport
from wxr_importer.stores import DuckDBDocumentStore, LocalMediaStore


@pytest.fixture(autouse=True)
def _fresh_meta_key_registry():
    clear_registered_meta_keys()
    yield
    clear_registered_meta_keys()


@pytest.fixture
def store(tmp_path):
    s = DuckDBDocumentStore(str(tmp_path / "book.duckdb"))
    yield s
    s.close()


def _commit(export, store, *, selection=None, localizer=None, default_parent=None):
    manifest = build_manifest(export, source_file="book.xml")
    selection = selection or ImportSelection(entry_types=manifest.entry_types)
    return commit_manifest(
        manifest,
        export,
        document_store=store,
        localizer=localizer,
        selection=selection,
        default_parent=default_parent,
    )


def test_chapters_are_attached_to_the_part_created_before_them(store):
    export = WxrExport(records=[
        make_record("c2", "chapter", parent="p2", order=1),
        make_record("p1", "part", content="", order=1),
        make_record("c1", "chapter", parent="p1", order=1),
        make_record("p2", "part", content="", order=2),
    ])
    assert _commit(export, store) == 4

    docs = {d.title: d for d in store.list_documents()}
    assert docs["Record c1"].parent_id == docs["Record p1"].id
    assert docs["Record c2"].parent_id == docs["Record p2"].id


def test_chapter_before_any_part_uses_default_parent(store):
    # A blog export is not re-ordered, so the chapter comes first
    export = WxrExport(records=[make_record("c", "chapter"), make_record("x", "post")])
    _commit(export, store, default_parent=99)

    chapter = next(d for d in store.list_documents() if d.post_type == "chapter")
    assert chapter.parent_id == 99


def test_parts_are_published_without_body_and_others_are_drafts(store):
    export = WxrExport(records=[
        make_record("p", "part", content="<p>ignored</p>"),
        make_record("fm", "front-matter", content="<p>Hello</p>"),
    ])
    _commit(export, store)

    docs = {d.post_type: d for d in store.list_documents()}
    assert docs["part"].status == "publish"
    assert docs["part"].content is None
    assert docs["front-matter"].status == "draft"
    assert docs["front-matter"].content == "<p>Hello</p>"


def test_titles_are_tag_stripped_and_types_match_manifest(store):
    export = WxrExport(records=[
        make_record("p", "part", title="Part <b>One</b>", content=""),
        make_record("c", "chapter", parent="p", title="<em>Intro</em>"),
        make_record("bm", "back-matter", title="Notes"),
    ])
    manifest = build_manifest(export, source_file="book.xml")
    _commit(export, store)

    docs = store.list_documents()
    assert [d.title for d in docs] == ["Part One", "Intro", "Notes"]
    assert [d.post_type for d in docs] == [manifest.entry_types[i] for i in ("p", "c", "bm")]


def test_skipped_and_unplanned_records_are_not_imported(store):
    export = WxrExport(records=[
        make_record("a", "post"),
        make_record("b", "post"),
        make_record("empty", "post", content=""),
    ])
    selection = ImportSelection(skip_ids=["b"], entry_types={"a": "post", "b": "post"})
    assert _commit(export, store, selection=selection) == 1
    assert [d.title for d in store.list_documents()] == ["Record a"]


def test_chapter_promoted_to_part_heads_the_chapters_after_it(store):
    export = WxrExport(records=[
        make_record("p", "part", content="", order=1),
        make_record("c1", "chapter", parent="p", order=1, meta=[("pb_part_content", "<p>Lead</p>")]),
        make_record("c2", "chapter", parent="p", order=2),
    ])
    manifest = build_manifest(export, source_file="book.xml")
    selection = ImportSelection(type_overrides={"c1": "part"}, entry_types=manifest.entry_types)
    _commit(export, store, selection=selection)

    docs = {d.title: d for d in store.list_documents()}
    assert docs["Record c1"].status == "publish"
    assert docs["Record c2"].parent_id == docs["Record c1"].id
    assert store.get_metadata(docs["Record c1"].id)["pb_part_content"] == "<p>Lead</p>"


def test_type_override_changes_committed_type(store):
    export = WxrExport(records=[make_record("a", "post")])
    selection = ImportSelection(type_overrides={"a": "back-matter"})
    _commit(export, store, selection=selection)
    assert store.list_documents()[0].post_type == "back-matter"


def test_metadata_is_copied_first_match_wins_and_flags_are_set(store):
    export = WxrExport(records=[
        make_record(
            "c",
            "chapter",
            meta=[
                ("pb_subtitle", "First"),
                ("pb_subtitle", "Second"),
                ("pb_short_title", ""),
                ("pb_section_author", 'a:2:{i:0;s:5:"Alice";i:1;s:3:"Bob";}'),
                ("unrelated", "x"),
            ],
        )
    ])
    _commit(export, store)

    doc = store.get_document(store.list_documents()[0].id)
    assert doc.metadata == {
        "pb_subtitle": "First",
        "pb_section_author": ["Alice", "Bob"],
        "pb_show_title": "on",
        "pb_export": "on",
    }


def test_part_content_meta_is_kept_for_parts_only(store):
    export = WxrExport(records=[
        make_record("p", "part", content="", meta=[("pb_part_content", "<p>Intro</p>")]),
        make_record("c", "chapter", parent="p", meta=[("pb_part_content", "<p>nope</p>")]),
    ])
    _commit(export, store)

    part, chapter = store.list_documents()
    assert store.get_metadata(part.id)["pb_part_content"] == "<p>Intro</p>"
    assert "pb_part_content" not in store.get_metadata(chapter.id)


def test_registered_meta_keys_are_copied(store):
    register_meta_key("pb_custom_key")
    assert "pb_custom_key" in import_meta_keys()
    export = WxrExport(records=[make_record("a", "post", meta=[("pb_custom_key", "yes")])])
    _commit(export, store)
    assert store.get_metadata(store.list_documents()[0].id)["pb_custom_key"] == "yes"


def test_clearing_the_registry_restores_default_keys():
    register_meta_key("pb_custom_key")
    clear_registered_meta_keys()
    assert "pb_custom_key" not in import_meta_keys()
    assert import_meta_keys() == DEFAULT_META_KEYS


def test_images_are_localized_once_across_records(tmp_path, store):
    good = "http://old.example/cover.png"
    bad = "http://old.example/gone.jpg"
    downloader = FakeDownloader(tmp_path, {good: image_bytes("PNG")})
    localizer = ImageLocalizer(
        ImageCache(), downloader, LocalMediaStore(str(tmp_path / "up"), "/uploads")
    )
    body = f'<p><img src="{good}"><img src="{bad}"></p>'
    export = WxrExport(records=[make_record("a", "post", content=body), make_record("b", "page", content=body)])

    _commit(export, store, localizer=localizer)

    assert sorted(downloader.calls) == sorted([good, bad])
    for doc in store.list_documents():
        assert '<img src="/uploads/cover.png"/>' in doc.content
        assert f'<img src="{bad}{FIXME_MARKER}"/>' in doc.content
        assert "<html>" not in doc.content and "<body>" not in doc.content


def test_document_scaffolding_in_content_is_stripped(store):
    body = "<!DOCTYPE html><html><body><p>Only this</p></body></html>"
    _commit(WxrExport(records=[make_record("a", "post", content=body)]), store)
    assert store.list_documents()[0].content == "<p>Only this</p>"


def test_reconsolidate_numbers_siblings(store):
    export = WxrExport(records=[
        make_record("p", "part", content=""),
        make_record("c1", "chapter", parent="p", order=1),
        make_record("c2", "chapter", parent="p", order=2),
    ])
    _commit(export, store)
    orders = {d.title: d.menu_order for d in store.list_documents()}
    assert orders == {"Record p": 1, "Record c1": 1, "Record c2": 2}


def test_unserialize_leaves_plain_strings_alone():
    assert maybe_unserialize("CC BY 4.0") == "CC BY 4.0"
    assert maybe_unserialize('s:5:"hello";') == "hello"
    assert maybe_unserialize("a:1:{broken") == "a:1:{broken"


def test_store_keeps_content_whitespace_but_trims_title(store):
    pid = store.create_document({
        "post_title": "  Spaced title \n",
        "post_type": "chapter",
        "post_content": "\n  <pre>  indented</pre>\n",
    })
    doc = store.get_document(pid)
    assert doc.title == "Spaced title"
    assert doc.content == "\n  <pre>  indented</pre>\n"
