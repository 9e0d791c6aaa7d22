"""测试辅助：固定访客 id + Cookie 读写"""

VISITOR = "visitor-1"


def cookie_header(visitor_id: str) -> dict[str, str]:
    """显式携带访客 Cookie 的请求头"""
    return {"Cookie": f"id={visitor_id}"}


def issued_visitor_id(response) -> str:
    """从 Set-Cookie 中取出签发的访客 id"""
    first = response.headers["set-cookie"].split(";")[0]
    name, _, value = first.partition("=")
    assert name.strip() == "id"
    return value.strip()
