import html
import re
import xml.etree.ElementTree as ET

from wxr_importer.models import WxrExport, WxrMeta, WxrRecord

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

# WXR 1.0, 1.1 e 1.2 usam namespaces diferentes para os campos wp:*
_WP_NS_PATTERN = re.compile(r"^http://wordpress\.org/export/1\.\d+/$")


class WxrParseError(Exception):
    """O arquivo de exportação não pôde ser lido ou não é um WXR válido."""


def _detect_wp_namespace(root):
    """Descobre o namespace ``wp`` usado pelo arquivo.

    Args:
        root (ET.Element): O elemento raiz ``<rss>`` do documento.

    Returns:
        str: O URI do namespace, ou o da versão 1.2 se nenhum for encontrado.
    """
    for element in root.iter():
        if element.tag.startswith("{"):
            uri = element.tag[1:].split("}", 1)[0]
            if _WP_NS_PATTERN.match(uri):
                return uri
    return "http://wordpress.org/export/1.2/"


def _text(item, tag):
    element = item.find(tag)
    if element is None or element.text is None:
        return ""
    return element.text


def _parse_postmeta(item, wp):
    """Extrai os pares ``wp:postmeta`` de um item, na ordem do arquivo.

    Chaves repetidas são mantidas; a busca posterior fica com a primeira.
    """
    meta = []
    for meta_element in item.findall(f"{{{wp}}}postmeta"):
        key = _text(meta_element, f"{{{wp}}}meta_key")
        if not key:
            continue
        meta.append(WxrMeta(key=key, value=_text(meta_element, f"{{{wp}}}meta_value")))
    return meta


def extract_wxr(file_path):
    """Extrai os registros de um arquivo de exportação WXR do WordPress.

    Esta função analisa o XML e produz um :class:`WxrRecord` por ``<item>``,
    preservando a ordem do arquivo. Nenhuma ordenação ou filtragem é feita
    aqui; isso é responsabilidade das etapas de classificação e seleção.

    Args:
        file_path (str): O caminho para o arquivo XML.

    Returns:
        WxrExport: O conjunto de registros extraídos.

    Raises:
        WxrParseError: Se o arquivo não existir, não puder ser lido, não for
            XML bem formado ou não tiver um elemento ``<channel>``.
    """
    try:
        tree = ET.parse(file_path)
    except (ET.ParseError, OSError) as e:
        raise WxrParseError(f"Could not parse {file_path}: {e}") from e

    root = tree.getroot()
    channel = root.find("channel")
    if channel is None:
        raise WxrParseError(f"{file_path} has no <channel> element; not a WXR file")

    wp = _detect_wp_namespace(root)
    records = []
    for item in channel.findall("item"):
        post_id = _text(item, f"{{{wp}}}post_id").strip()
        try:
            record = WxrRecord(
                id=post_id,
                title=html.unescape(_text(item, "title")),
                content=_text(item, f"{{{CONTENT_NS}}}encoded"),
                post_type=_text(item, f"{{{wp}}}post_type").strip() or "post",
                post_parent=_text(item, f"{{{wp}}}post_parent"),
                menu_order=_text(item, f"{{{wp}}}menu_order"),
                postmeta=_parse_postmeta(item, wp),
            )
        except ValueError as e:
            raise WxrParseError(f"Error processing item with ID {post_id or 'unknown'} in {file_path}: {e}") from e
        records.append(record)
    return WxrExport(source_file=str(file_path), records=records)
