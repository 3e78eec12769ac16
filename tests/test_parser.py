from __future__ import annotations

from pathlib import Path

import pytest

from inidoc import IniDocument, IniParser, IniParsingException
from inidoc.ini.settings import IniWriterSettings


def test_write_then_read(tmp_path: Path) -> None:
    path = tmp_path / "rules.ini"
    doc = IniDocument()
    doc.add_comment("generated")
    doc.set_value("General", "Name", "Allied|Soviet")
    doc.set_value("General", "Note", "line1\nline2")

    IniParser(str(path), "utf-8").write(doc)
    assert path.read_text(encoding="utf-8") == (
        ";generated\n[General]\nName=Allied||Soviet\nNote=line1|nline2")

    loaded = IniParser(str(path), "utf-8").read()
    assert list(loaded) == list(doc)


def test_writer_settings_are_used(tmp_path: Path) -> None:
    path = tmp_path / "spaced.ini"
    doc = IniDocument()
    doc.loads("a=1\n[S]\nb=2")
    IniParser(
        str(path), "utf-8",
        writer_settings=IniWriterSettings(empty_line_before_section_header=True),
    ).write(doc)
    assert path.read_text(encoding="utf-8") == "a=1\n\n[S]\nb=2"


def test_read_broken_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.ini"
    path.write_text("[S]\nk=v\n[]\n", encoding="utf-8")
    with pytest.raises(IniParsingException) as exc:
        IniParser(str(path), "utf-8").read()
    assert exc.value.line_number == 3


def test_readstream_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "a.ini"
    path.write_text("[S]\nk=v", encoding="utf-8")
    doc = IniDocument()
    doc.loads("old=1")
    parser = IniParser(str(path), "utf-8")
    with open(path, encoding="utf-8") as fp:
        assert parser.readstream(fp, doc) is doc
    assert doc.dumps() == "[S]\nk=v"


def test_wrong_encoding_falls_back_to_detection(tmp_path: Path) -> None:
    path = tmp_path / "gbk.ini"
    text = (
        "[小节]\n"
        "名字=红色警戒\n"
        "说明=这是一个用来测试编码检测的中文配置文件，内容需要足够长，"
        "这样字符集检测才能给出足够高的置信度。\n"
        "备注=中华人民共和国的首都是北京，上海是一个非常大的城市。\n"
    )
    path.write_bytes(text.encode("gbk"))

    with pytest.warns(UserWarning):
        doc = IniParser(str(path), "utf-8").read()
    assert doc.value("小节", "名字") == "红色警戒"
