"""
Unit tests for the quote-aware CSV tokenizer
"""
from road_fines.csv_parser import parse_csv, split_line


class TestSplitLine:
    """Test field splitting within one line."""

    def test_plain_fields_are_trimmed(self):
        assert split_line(" 2023 , NSW ,17-25") == ["2023", "NSW", "17-25"]

    def test_comma_inside_quotes_does_not_split(self):
        assert split_line('"VIC","All ages","12,345"') == ["VIC", "All ages", "12,345"]

    def test_doubled_quotes_are_not_an_escape(self):
        # A bare quote always toggles; no quote character survives
        assert split_line('a,"he said ""hi""",c') == ["a", "he said hi", "c"]

    def test_unbalanced_quote_swallows_rest_of_line(self):
        assert split_line('1,"a,b,2') == ["1", "a,b,2"]

    def test_trailing_separator_yields_empty_field(self):
        assert split_line("2021,VIC,,") == ["2021", "VIC", "", ""]


class TestParseCsv:
    """Test whole-document parsing."""

    def test_rows_keyed_by_header(self, age_csv_text):
        parsed = parse_csv(age_csv_text)

        assert parsed.headers == ("YEAR", "JURISDICTION", "AGE_GROUP", "Sum(FINES)")
        assert list(parsed.rows.columns) == list(parsed.headers)
        first = parsed.rows.iloc[0].to_dict()
        assert first == {
            "YEAR": "2022",
            "JURISDICTION": "NSW",
            "AGE_GROUP": "All ages",
            "Sum(FINES)": "1000",
        }

    def test_mismatched_lines_skipped_and_counted(self, age_csv_text):
        parsed = parse_csv(age_csv_text)

        # 13 non-blank data lines, one of them with only three fields
        assert len(parsed.rows) == 12
        assert parsed.skipped == 1

    def test_quoted_comma_kept_in_one_field(self, age_csv_text):
        rows = parse_csv(age_csv_text).rows
        vic = rows[(rows["JURISDICTION"] == "VIC") & (rows["AGE_GROUP"] == "All ages")]

        assert vic["Sum(FINES)"].tolist() == ["12,345"]

    def test_every_matching_line_becomes_a_row(self):
        text = "A,B\n1,2\n3,4\n5,6\n"
        parsed = parse_csv(text)

        assert len(parsed.rows) == 3
        assert parsed.skipped == 0

    def test_blank_lines_are_not_counted(self):
        parsed = parse_csv("A,B\n\n1,2\n   \n3,4")

        assert len(parsed.rows) == 2
        assert parsed.skipped == 0

    def test_crlf_line_endings(self):
        parsed = parse_csv("A,B\r\n1,2\r\n3,4\r\n")

        assert parsed.headers == ("A", "B")
        assert parsed.rows["B"].tolist() == ["2", "4"]

    def test_header_only_document(self):
        parsed = parse_csv('"YEAR","FINES"\n')

        assert parsed.rows.empty
        assert list(parsed.rows.columns) == ["YEAR", "FINES"]

    def test_empty_document(self):
        parsed = parse_csv("   \n")

        assert parsed.rows.empty
        assert parsed.headers == ()
        assert parsed.skipped == 0
