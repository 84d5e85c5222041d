"""Loose RFC 3986 URI splitting.

Based on parseUri by Steven Levithan, see
http://blog.stevenlevithan.com/archives/parseuri
Every component that isn't present comes back as an empty string.
"""
import re
import typing

URI_RE = re.compile(
    r"^(?:([^:/?#]+):)?"  # scheme
    r"(?://("  # authority
    r"(?:(([^:@]*)(?::([^:@]*))?)?@)?"  # user_info, user, password
    r"([^:/?#]*)"  # host
    r"(?::(\d*))?"  # port
    r"))?"
    r"((((?:[^?#/]*/)*)([^?#]*))"  # relative, path, directory, file
    r"(?:\?([^#]*))?"  # query
    r"(?:#(.*))?)",  # fragment
)
QUERY_RE = re.compile(r"(?:^|&)([^&=]*)=?([^&]*)")


class URIParts(typing.NamedTuple):
    source: str
    scheme: str
    authority: str
    user_info: str
    user: str
    password: str
    host: str
    port: str
    relative: str
    path: str
    directory: str
    file: str
    query: str
    fragment: str
    query_key: typing.Dict[str, str]


def parse_query(query: str) -> typing.Dict[str, str]:
    """Splits a query string on '&' and '='. Keys without a value
    map to '', empty keys are dropped and the last duplicate wins.
    """
    query_key: typing.Dict[str, str] = {}
    for match in QUERY_RE.finditer(query):
        key, value = match.groups()
        if key:
            query_key[key] = value
    return query_key


def parse_uri(uri: str) -> URIParts:
    # The pattern can match the empty string so this always succeeds.
    match = URI_RE.match(uri)
    groups = [x or "" for x in match.groups()]
    return URIParts(match.group(0), *groups, query_key=parse_query(groups[11]))
