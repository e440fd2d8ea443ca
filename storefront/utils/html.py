import re
from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_SAFE_COLOR = re.compile(r"color\s*:\s*(#[0-9a-fA-F]{3,6}|[a-zA-Z]+)\s*;?", re.IGNORECASE)

ALLOWED_TAGS = {
    "b", "i", "em", "strong", "a", "p", "ul", "ol", "li", "br", "img",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote",
}
ALLOWED_ATTRS = {"href", "src", "alt", "title", "target", "rel", "style"}
DROPPED_WITH_CONTENT = {"script", "style", "iframe", "object", "embed", "template"}


def strip_markup(html: str | None, max_length: int | None = None) -> str:
    """
    Convertit une description riche (HTML) en texte brut.
    - Extrait le texte via BeautifulSoup, compresse les espaces.
    - Retire tout '<' ou '>' restant (entités décodées comprises).
    - Tronque à max_length caractères si fourni.
    """
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    text = _ANGLE_BRACKETS.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    if max_length is not None and len(text) > max_length:
        text = text[:max_length]
    return text


def _safe_url(value: str) -> bool:
    v = (value or "").strip().lower()
    return not v.startswith(("javascript:", "vbscript:", "data:text"))


def sanitize_html(html: str | None) -> str:
    """
    Nettoie une description produit pour affichage (liste blanche).
    - Balises hors ALLOWED_TAGS: retirées, leur texte est conservé
      (script/style/iframe...: supprimés avec leur contenu).
    - Attributs hors ALLOWED_ATTRS et gestionnaires on*: retirés.
    - style: seule une couleur (hex ou nom) est conservée.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(DROPPED_WITH_CONTENT):
        tag.decompose()
    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            value = tag.attrs[attr]
            if attr not in ALLOWED_ATTRS:
                del tag.attrs[attr]
            elif attr == "style":
                m = _SAFE_COLOR.search(value if isinstance(value, str) else " ".join(value))
                if m:
                    tag.attrs[attr] = f"color:{m.group(1)}"
                else:
                    del tag.attrs[attr]
            elif attr in ("href", "src") and not _safe_url(value):
                del tag.attrs[attr]
    return str(soup)
