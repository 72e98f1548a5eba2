"""Hypothesis strategies for job options documents."""

from hypothesis import strategies as st

# Keys: no whitespace (parse rejects it); everything else is escaped by dump.
option_key = st.text(
    min_size=1,
    max_size=30,
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters=" \t\f",
    ),
)

# Values may hold \f, \v and Unicode line separators; only CR/LF end a line.
option_value = st.text(
    max_size=80,
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S", "Zs", "Zl", "Zp"),
        whitelist_characters="\f\v\x85",
    ),
)

options_map = st.dictionaries(keys=option_key, values=option_value, max_size=10)

# Plain key=value documents with no macros, escapes or separators in values.
plain_key = st.from_regex(r"[A-Za-z_][A-Za-z0-9_.-]{0,15}", fullmatch=True)
plain_value = st.from_regex(r"[A-Za-z0-9_./,-]{0,20}", fullmatch=True)
plain_pairs = st.lists(
    st.tuples(plain_key, plain_value),
    max_size=10,
    unique_by=lambda pair: pair[0],
)
