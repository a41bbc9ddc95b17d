import csv
import json

import pytest

from movieapi.crew import (
    CrewMember,
    CrewModel,
    delete_credits_for_movie,
    parse_crew_data,
)
from movieapi.csvstore import CSVError

CREW_862 = (
    "[{'credit_id': 'c1', 'department': 'Directing', 'gender': 2, "
    "'id': 7879, 'job': 'Director', 'name': 'Ann Example'}]"
)
CREW_8844 = (
    "[{'credit_id': 'c2', 'department': 'Writing', 'gender': 1, "
    "'id': 511, 'job': 'Writer', 'name': 'Bob Example'}, "
    "{'credit_id': 'c3', 'department': 'Directing', 'gender': 2, "
    "'id': 7879, 'job': 'Director', 'name': 'Ann Example'}]"
)


def _write(path, rows):
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle).writerows(rows)


def _read(path):
    with open(path, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


@pytest.fixture
def credits(tmp_path):
    path = tmp_path / "credits.csv"
    _write(
        path,
        [
            ["cast", "crew", "id"],
            ["[]", CREW_862, "862"],
            ["[]", CREW_8844, "8844"],
            ["[]", "[{'id': 1, 'name': None}]", "15602"],
            ["[]", "[]", "abc"],
            ["only", "two"],
        ],
    )
    return path


def test_parse_crew_data_reads_members(credits):
    crews = parse_crew_data(credits)
    assert crews[862] == [
        CrewMember(
            credit_id="c1", id=7879, name="Ann Example", department="Directing", job="Director"
        )
    ]
    assert [member.id for member in crews[8844]] == [511, 7879]


def test_parse_crew_data_skips_bad_rows(credits):
    assert set(parse_crew_data(credits)) == {862, 8844}


def test_parse_null_crew_gives_empty_list(tmp_path):
    path = tmp_path / "credits.csv"
    _write(path, [["cast", "crew", "id"], ["[]", "null", "5"]])
    assert parse_crew_data(path) == {5: []}


def test_missing_file_raises(tmp_path):
    with pytest.raises(CSVError):
        parse_crew_data(tmp_path / "absent.csv")


def test_list_crew_members_found(credits):
    model = CrewModel(str(credits))
    members = model.list_crew_members("8844")
    assert [member.name for member in members] == ["Bob Example", "Ann Example"]


def test_list_crew_members_invalid_id(credits):
    with pytest.raises(ValueError, match="invalid movie ID format"):
        CrewModel(credits).list_crew_members("abc")


def test_list_crew_members_unknown_movie(credits):
    with pytest.raises(LookupError, match="movie not found"):
        CrewModel(credits).list_crew_members("15602")


def test_update_changes_memory_and_file(credits):
    model = CrewModel(credits)
    model.update_crew_member("862", "7879", CrewMember(name="New Name"))

    assert model.crew_data[862][0].name == "New Name"
    assert model.crew_data[862][0].job == "Director"

    reloaded = parse_crew_data(credits)
    assert reloaded[862][0].name == "New Name"
    assert reloaded[862][0].department == "Directing"

    saved = json.loads(_read(credits)[1][1])
    assert saved[0]["gender"] == 2
    assert saved[0]["name"] == "New Name"


def test_update_changes_every_movie_with_member(credits):
    model = CrewModel(credits)
    model.update_crew_member("862", "7879", CrewMember(job="Producer"))
    assert model.crew_data[8844][1].job == "Producer"
    assert model.crew_data[8844][0].job == "Writer"


def test_update_drops_unparseable_rows(credits):
    CrewModel(credits).update_crew_member("862", "511", CrewMember(department="Art"))
    rows = _read(credits)
    assert [row[2] for row in rows] == ["id", "862", "8844"]


def test_update_unknown_member_leaves_file(credits):
    before = _read(credits)
    with pytest.raises(LookupError, match="crew member not found"):
        CrewModel(credits).update_crew_member("862", "1", CrewMember(name="X"))
    assert _read(credits) == before


def test_delete_credits_removes_movie(credits):
    delete_credits_for_movie(credits, "862")
    ids = [row[2] for row in _read(credits) if len(row) >= 3]
    assert "862" not in ids
    assert "8844" in ids


def test_delete_credits_unknown_movie_keeps_rows(credits):
    delete_credits_for_movie(credits, "1")
    ids = [row[2] for row in _read(credits)]
    assert ids == ["id", "862", "8844", "15602", "abc"]