"""Tests for company name and address query sanitization."""

from site_finder.services.query_sanitizer import (
    sanitize_address_for_query,
    sanitize_company_name_for_query,
)


class TestSanitizeCompanyName:
    """Test sanitize_company_name_for_query."""

    def test_full_width_alphanumerics(self):
        """Test full-width letters and digits become ASCII."""
        assert sanitize_company_name_for_query("ＡＢＣ１２３ｘｙｚ") == "ABC123xyz"

    def test_full_width_space(self):
        """Test ideographic spaces become ASCII spaces."""
        assert sanitize_company_name_for_query("株式会社　テスト") == "株式会社 テスト"

    def test_other_characters_untouched(self):
        """Test kana, kanji and half-width text are preserved."""
        assert sanitize_company_name_for_query("VIVID株式会社") == "VIVID株式会社"
        assert sanitize_company_name_for_query("ｶﾌﾞｼｷｶﾞｲｼｬ") == "ｶﾌﾞｼｷｶﾞｲｼｬ"


class TestSanitizeAddress:
    """Test sanitize_address_for_query."""

    def test_block_numbers(self):
        """Test chome/ban/go notation becomes hyphenated numbers."""
        assert sanitize_address_for_query("愛知県名古屋市中区錦1丁目17番13号") == "愛知県名古屋市中区錦1-17-13"

    def test_banchi(self):
        """Test banchi is treated like ban."""
        assert sanitize_address_for_query("大阪府大阪市北区梅田3番地") == "大阪府大阪市北区梅田3"

    def test_quotes_removed(self):
        """Test quote and bracket characters are removed."""
        assert sanitize_address_for_query('"東京都「港区」"') == "東京都 港区"

    def test_nfkc_normalization(self):
        """Test full-width digits are normalized before block-number rewriting."""
        assert sanitize_address_for_query("千代田区１丁目２番３号") == "千代田区1-2-3"

    def test_whitespace_and_hyphens_collapse(self):
        """Test repeated whitespace and hyphens are collapsed."""
        assert sanitize_address_for_query("  港区   芝公園 4 - - 2 ") == "港区 芝公園 4-2"

    def test_building_suffix_kept(self):
        """Test text after the block number is kept."""
        assert sanitize_address_for_query("錦1丁目17番13号2F") == "錦1-17-13-2F"

    def test_empty(self):
        """Test empty input stays empty."""
        assert sanitize_address_for_query("") == ""
