"""URL 파싱 유틸 테스트"""
import pytest
from src.core.exceptions import MalformedDataException
from src.utils.url_utils import extract_id_from_url


class TestExtractIdFromUrl:
    """PokeAPI 리소스 URL에서 id 추출 테스트"""

    def test_trailing_slash(self):
        assert extract_id_from_url("https://pokeapi.co/api/v2/pokemon/25/") == 25

    def test_without_trailing_slash(self):
        assert extract_id_from_url("https://pokeapi.co/api/v2/pokemon-species/133") == 133

    def test_form_id(self):
        """변종 id (10000번대)"""
        assert extract_id_from_url("https://pokeapi.co/api/v2/pokemon/10080/") == 10080

    @pytest.mark.parametrize(
        "url",
        [
            "https://pokeapi.co/api/v2/pokemon/pikachu/",
            "https://pokeapi.co/api/v2/pokemon/",
            "",
            None,
        ],
    )
    def test_malformed(self, url):
        """패턴 불일치는 건너뛰지 않고 예외"""
        with pytest.raises(MalformedDataException):
            extract_id_from_url(url)

    def test_zero_id(self):
        with pytest.raises(MalformedDataException):
            extract_id_from_url("https://pokeapi.co/api/v2/pokemon/0/")
