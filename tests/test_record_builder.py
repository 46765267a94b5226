import pytest

from common.models import RowPolicy
from data_processing.record_builder import parse_csv_text
from data_processing.sheet_schema import VARIANT_A, VARIANT_B

HEADER_A = "customerID,customerName,BackSeats,Steering,CarTyres,Door,Dashboard,FrontSeat,TotalTime"
HEADER_B = ("Timestamp,Customer Name,DashBoard,Sterring,Door,Dicky,Front Seat,Back Seats,"
            "Car Tyres,Car BackSide,Charging Port,Front & Light")
FETCHED_AT = "2025-10-18T12:00:00+00:00"


def _csv(*lines):
    return "\n".join(lines)


def test_variant_a_row_becomes_one_record():
    text = _csv(HEADER_A, "1,Alice,2.8,3.5,8.6,7.2,10.1,11.93,44.13")
    records = parse_csv_text(text, VARIANT_A, fetched_at=FETCHED_AT)

    assert len(records) == 1
    rec = records[0]
    assert rec.customer_name == "Alice"
    assert rec.sections["backSeats"] == pytest.approx(2.8)
    assert rec.sections["frontSeat"] == pytest.approx(11.93)
    assert rec.total_time == pytest.approx(44.13)
    assert rec.session_id == "sheets_1"
    assert rec.session_date == FETCHED_AT
    assert set(rec.sections) == {"backSeats", "steering", "carTyres", "door", "dashboard", "frontSeat"}


def test_empty_numeric_cell_reads_as_zero():
    text = _csv(HEADER_A, "1,Bob,,3.5,8.6,7.2,10.1,11.93,37.23")
    rec = parse_csv_text(text, VARIANT_A)[0]
    assert rec.sections["backSeats"] == 0
    assert rec.total_time == pytest.approx(37.23)


def test_records_keep_source_order_and_skip_blank_lines():
    text = _csv(HEADER_A, "1,Alice,1,1,1,1,1,1,6", "", "2,Bob,2,2,2,2,2,2,12", "3,Cara,3,3,3,3,3,3,18", "")
    names = [r.customer_name for r in parse_csv_text(text, VARIANT_A)]
    assert names == ["Alice", "Bob", "Cara"]


def test_zero_total_row_dropped_by_default_policy():
    text = _csv(HEADER_A, "1,Zed,0,0,0,0,0,0,0", "2,Amy,1,0,0,0,0,0,1")
    records = parse_csv_text(text, VARIANT_A)
    assert [r.customer_name for r in records] == ["Amy"]


def test_accept_all_keeps_zero_total_row():
    text = _csv(HEADER_A, "1,Zed,0,0,0,0,0,0,0")
    records = parse_csv_text(text, VARIANT_A, row_policy=RowPolicy.ACCEPT_ALL)
    assert len(records) == 1
    assert records[0].total_time == 0


def test_total_is_summed_without_total_column():
    header = "customerID,customerName,BackSeats,Steering,CarTyres,Door,Dashboard,FrontSeat"
    rec = parse_csv_text(_csv(header, "1,A,1,2,3,4,5,6"), VARIANT_A)[0]
    assert rec.total_time == pytest.approx(21)
    assert rec.total_time == pytest.approx(sum(rec.sections.values()))


def test_short_rows_are_skipped():
    text = _csv(HEADER_A, "1,Alice,2", "2,Bob,1,1,1,1,1,1,6")
    assert [r.customer_name for r in parse_csv_text(text, VARIANT_A)] == ["Bob"]


def test_header_only_or_empty_text_gives_nothing():
    assert parse_csv_text(HEADER_A, VARIANT_A) == []
    assert parse_csv_text("", VARIANT_A) == []


def test_quoted_name_with_comma_and_crlf_lines():
    text = HEADER_A + "\r\n" + '3,"Doe, Jane",1,1,1,1,1,1,6' + "\r\n"
    rec = parse_csv_text(text, VARIANT_A)[0]
    assert rec.customer_name == "Doe, Jane"
    assert rec.session_id == "sheets_3"
    assert rec.total_time == 6


def test_missing_id_and_name_fall_back_to_line_index():
    text = _csv(HEADER_A, ",,1,1,1,1,1,1,6")
    rec = parse_csv_text(text, VARIANT_A)[0]
    assert rec.session_id == "sheets_1"
    assert rec.customer_name == "User 1"


def test_repeated_customer_id_stays_unique():
    text = _csv(HEADER_A, "1,Alice,1,1,1,1,1,1,6", "1,Alice again,1,1,1,1,1,1,6")
    ids = [r.session_id for r in parse_csv_text(text, VARIANT_A)]
    assert ids == ["sheets_1", "sheets_1_2"]


def test_negative_cells_clamp_to_zero():
    text = _csv(HEADER_A, "1,Neg,-5,1,1,1,1,1,-3")
    records = parse_csv_text(text, VARIANT_A, row_policy=RowPolicy.ACCEPT_ALL)
    assert records[0].sections["backSeats"] == 0
    assert records[0].total_time == 0


def test_variant_b_form_layout():
    text = _csv(HEADER_B, "10/18/2025 14:03:22,Priya,1,2,3,4,5,6,7,8,9,10")
    records = parse_csv_text(text, VARIANT_B)

    assert len(records) == 1
    rec = records[0]
    assert rec.customer_name == "Priya"
    assert rec.session_date == "10/18/2025 14:03:22"
    assert rec.session_id == "sheets_1"
    assert rec.sections["dashboard"] == 1
    assert rec.sections["steering"] == 2
    assert rec.sections["frontLight"] == 10
    assert len(rec.sections) == 10
    assert rec.total_time == pytest.approx(55)


def test_variant_b_accepts_zero_rows_and_three_column_minimum():
    text = _csv(HEADER_B, "10/18/2025 14:03:22,Empty,0", "x,y")
    records = parse_csv_text(text, VARIANT_B)
    assert len(records) == 1
    assert records[0].total_time == 0
    assert all(v == 0 for v in records[0].sections.values())


def test_missing_timestamp_cell_uses_fetch_time():
    text = _csv(HEADER_B, ",Priya,1,2,3")
    rec = parse_csv_text(text, VARIANT_B, fetched_at=FETCHED_AT)[0]
    assert rec.session_date == FETCHED_AT
