import pandas as pd

from tools.seed_import_cli import import_records, list_columns, load_df, parse_list, row_to_payload


def test_parse_list_accepts_json_and_commas():
    assert parse_list('["Fully Funded", "Graduate"]') == ["Fully Funded", "Graduate"]
    assert parse_list("Fully Funded, Graduate,") == ["Fully Funded", "Graduate"]
    assert parse_list(float("nan")) == []
    assert parse_list(None) == []


def test_list_columns_come_from_schema():
    cols = list_columns("universities")
    assert {"programsOffered", "features", "notableAlumni"} <= cols
    assert "name" not in cols


def test_row_to_payload_skips_empty_cells():
    payload = row_to_payload("scholarships", {"title": "T", "tags": "a, b", "link": float("nan")})
    assert payload == {"title": "T", "tags": ["a", "b"]}


def test_import_upserts_by_slug(tmp_path, storage):
    csv = tmp_path / "scholarships.csv"
    pd.DataFrame([
        {"title": "Erasmus Mundus", "description": "EU joint masters", "amount": "€1,400/month",
         "deadline": "January 2026", "country": "Europe", "tags": "Fully Funded, Masters"},
        {"title": "Rhodes Scholarship", "description": "Oxford postgraduate award", "amount": "Full",
         "deadline": "October 2025", "country": "United Kingdom", "tags": '["Leadership"]'},
    ]).to_csv(csv, index=False)

    df = load_df(str(csv))
    records = df.astype(object).where(df.notnull(), None).to_dict(orient="records")
    stats = import_records(storage, "scholarships", records)
    assert stats == {"created": 2, "updated": 0, "failed": 0}
    assert storage.get_by_slug("scholarships", "erasmus-mundus")["tags"] == ["Fully Funded", "Masters"]

    records[0]["amount"] = "€1,500/month"
    stats = import_records(storage, "scholarships", records)
    assert stats == {"created": 0, "updated": 2, "failed": 0}
    assert storage.get_by_slug("scholarships", "erasmus-mundus")["amount"] == "€1,500/month"
    assert len(storage.get_all("scholarships")) == 2


def test_import_reports_invalid_rows(storage):
    stats = import_records(storage, "countries", [{"name": "Nowhere", "description": "d"}])
    assert stats == {"created": 0, "updated": 0, "failed": 1}
