from jurispanel.services.content_hash import content_hash


def test_empty_string_is_the_seed():
    assert content_hash("") == "1505"


def test_single_character():
    # ((5381 * 33) ^ ord("a")) in hex
    assert content_hash("a") == "2b5c4"


def test_same_text_same_digest():
    text = "Sessão de Julgamento da 1ª Turma\nProcesso 0001234-56.2023"
    assert content_hash(text) == content_hash(text)


def test_one_character_difference_changes_digest():
    assert content_hash("Processo 0001234") != content_hash("Processo 0001235")


def test_digest_is_unpadded_lowercase_hex():
    digest = content_hash("Apelação Cível " * 200)
    assert digest == digest.lower()
    int(digest, 16)
    assert len(digest) <= 8


def test_non_bmp_characters_hash_as_two_units():
    # U+1F600 is the surrogate pair D83D DE00
    assert content_hash("\U0001F600") == "50fe98"
