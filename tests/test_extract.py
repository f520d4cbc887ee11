from opencode_inline.wrapper.extract import extract_first_block, reduce_response


def test_first_block_body_is_extracted() -> None:
    response = "Here:\n```python\nprint(1)\n```\nDone."

    extraction = reduce_response(response, strip_codeblock=True)

    assert extraction.payload == "print(1)\n"
    assert extraction.kind == "block"
    assert extraction.matched


def test_response_without_fences_is_returned_unchanged() -> None:
    response = "print(1)\nprint(2)\n"

    extraction = reduce_response(response, strip_codeblock=True)

    assert extraction.payload == response
    assert extraction.kind == "verbatim"
    assert not extraction.matched


def test_only_the_first_of_several_blocks_is_kept() -> None:
    response = "One:\n```js\nfirst()\n```\nTwo:\n```js\nsecond()\n```\n"
    assert extract_first_block(response).payload == "first()\n"


def test_strip_disabled_keeps_fences() -> None:
    response = "Here:\n```python\nprint(1)\n```\nDone."
    extraction = reduce_response(response, strip_codeblock=False)
    assert extraction.payload == response
    assert extraction.kind == "verbatim"


def test_unclosed_fence_falls_back_to_full_response() -> None:
    response = "```python\nprint(1)\n"
    extraction = extract_first_block(response)
    assert extraction.payload == response
    assert not extraction.matched


def test_multiline_body_and_blank_lines_are_preserved() -> None:
    response = "```\ndef f():\n\n    return 1\n```"
    assert extract_first_block(response).payload == "def f():\n\n    return 1\n"


def test_closing_fence_must_match_opening_character_and_length() -> None:
    response = "````md\n```python\nx = 1\n```\n````\n"
    assert extract_first_block(response).payload == "```python\nx = 1\n```\n"


def test_tilde_fences_are_recognized() -> None:
    response = "~~~ruby\nputs 1\n~~~\n"
    assert extract_first_block(response).payload == "puts 1\n"


def test_empty_block_yields_empty_payload() -> None:
    extraction = extract_first_block("```\n```\n")
    assert extraction.payload == ""
    assert extraction.matched


def test_crlf_response() -> None:
    response = "```c\r\nint x;\r\n```\r\n"
    assert extract_first_block(response).payload == "int x;\r\n"
