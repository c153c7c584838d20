# services/report_renderer.py
from __future__ import annotations
import datetime
import decimal
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

import yaml  # pip install pyyaml
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

import services.config as config
from schemas import Client, Dish, Invoice
from services.errors import RenderError

logger = logging.getLogger("uvicorn")

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}
PARAMETERS = {"txt_client", "txt_invoice", "txt_description", "txt_total"}

_MISSING = object()


@dataclass
class Column:
    name: str
    source: str
    cfg: Dict[str, Any]
    width: Optional[float] = None


@dataclass
class CompiledTemplate:
    name: str
    title: str
    page_size: tuple
    fields: List[Dict[str, Any]]
    columns: List[Column]
    footer: Optional[Dict[str, Any]] = None


def _check_parameter(block: Any, where: str) -> Dict[str, Any]:
    if not isinstance(block, dict) or not block.get("parameter"):
        raise RenderError(f"{where} needs a 'parameter'")
    if block["parameter"] not in PARAMETERS:
        raise RenderError(f"{where} binds unknown parameter '{block['parameter']}'")
    return block


def compile_template(raw: str) -> CompiledTemplate:
    """
    Parse and validate a YAML report layout. Every structural problem is
    reported here as a RenderError, before any PDF work starts.
    """
    try:
        cfg = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise RenderError(f"template is not valid YAML: {e}") from e
    if not isinstance(cfg, dict):
        raise RenderError("template must be a mapping")
    try:
        return _compile(cfg)
    except (ValueError, TypeError, KeyError) as e:
        # e.g. width_cm: wide, or fields given as a scalar
        raise RenderError(f"template is malformed: {e}") from e


def _compile(cfg: Dict[str, Any]) -> CompiledTemplate:
    cols = cfg.get("columns")
    if not isinstance(cols, list) or not cols:
        raise RenderError("template declares no columns")
    columns: List[Column] = []
    for i, c in enumerate(cols):
        if not isinstance(c, dict) or not c.get("name") or not c.get("source"):
            raise RenderError(f"column #{i} needs 'name' and 'source'")
        width = c.get("width_cm")
        columns.append(Column(
            name=str(c["name"]),
            source=str(c["source"]),
            cfg=c,
            width=float(width) * cm if width is not None else None,
        ))

    fields = [_check_parameter(f, f"field #{i}") for i, f in enumerate(cfg.get("fields") or [])]
    footer = cfg.get("footer")
    if footer is not None:
        footer = _check_parameter(footer, "footer")

    page_size = PAGE_SIZES.get(str(cfg.get("page_size", "A4")).upper())
    if page_size is None:
        raise RenderError(f"unsupported page size '{cfg.get('page_size')}'")

    return CompiledTemplate(
        name=str(cfg.get("name", "report")),
        title=str(cfg.get("title", "")),
        page_size=page_size,
        fields=fields,
        columns=columns,
        footer=footer,
    )


# ---------- binding ----------
def _get_attr_path(root: Any, path: str):
    cur = root
    for part in path.split("."):
        if cur is None:
            return None
        if isinstance(cur, dict):
            cur = cur.get(part, _MISSING)
        else:
            cur = getattr(cur, part, _MISSING)
        if cur is _MISSING:
            return _MISSING
    return cur


def _fmt_value(val: Any, cfg: dict) -> str:
    if val is None:
        return str(cfg.get("default", ""))
    if "date_format" in cfg and isinstance(val, (datetime.datetime, datetime.date)):
        return val.strftime(cfg["date_format"])
    if isinstance(val, bool):
        return "yes" if val else "no"
    if isinstance(val, (int, float, decimal.Decimal)):
        x = decimal.Decimal(str(val))
        if "round" in cfg:
            q = decimal.Decimal(10) ** (-int(cfg["round"]))
            x = x.quantize(q, rounding=decimal.ROUND_HALF_UP)
        return format(x, "f")
    return str(val)


def row_source(invoice: Invoice) -> List[Dict[str, Any]]:
    rows = []
    for item in invoice.items:
        if not isinstance(item.dish, Dish):
            raise RenderError(f"dish {item.dish.id} is not resolved")
        rows.append({
            "dish": item.dish,
            "quantity": item.quantity,
            "subtotal": item.dish.price * item.quantity,
        })
    return rows


def bind_parameters(invoice: Invoice, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(invoice.client, Client):
        raise RenderError(f"client {invoice.client.id} is not resolved")
    return {
        "txt_client": invoice.client.display_name,
        "txt_invoice": invoice.id,
        "txt_description": invoice.description,
        "txt_total": sum(r["subtotal"] for r in rows),
    }


def _cell(row: Dict[str, Any], col: Column) -> str:
    val = _get_attr_path(row, col.source)
    if val is _MISSING:
        raise RenderError(f"column '{col.name}': row has no field '{col.source}'")
    return _fmt_value(val, col.cfg)


# ---------- PDF ----------
def _build_pdf(tpl: CompiledTemplate, params: Dict[str, Any], rows: List[Dict[str, Any]]) -> bytes:
    styles = getSampleStyleSheet()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=tpl.page_size,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=f"{tpl.title} {params['txt_invoice'] or ''}".strip(),
    )

    story = [Paragraph(escape(tpl.title), styles["Title"]), Spacer(1, 0.4 * cm)]
    for f in tpl.fields:
        value = _fmt_value(params[f["parameter"]], f)
        label = escape(str(f.get("label", f["parameter"])))
        story.append(Paragraph(f"<b>{label}:</b> {escape(value)}", styles["BodyText"]))
    story.append(Spacer(1, 0.5 * cm))

    data = [[c.name for c in tpl.columns]]
    data += [[_cell(row, c) for c in tpl.columns] for row in rows]
    table = Table(data, colWidths=[c.width for c in tpl.columns], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#333333")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#999999")),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(table)

    if tpl.footer:
        value = _fmt_value(params[tpl.footer["parameter"]], tpl.footer)
        label = escape(str(tpl.footer.get("label", tpl.footer["parameter"])))
        story.append(Spacer(1, 0.4 * cm))
        story.append(Paragraph(f"<b>{label}:</b> {escape(value)}", styles["BodyText"]))

    doc.build(story)
    return buffer.getvalue()


class ReportRenderer:
    """
    Renders a resolved invoice with the YAML layout at `template_path`.
    The template is read and compiled on every call so edits show up
    without a restart.
    """

    def __init__(self, template_path: str | Path | None = None):
        self.template_path = Path(template_path or config.REPORT_TEMPLATE)

    def load_template(self) -> CompiledTemplate:
        try:
            raw = self.template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderError(f"cannot read template {self.template_path}: {e}") from e
        return compile_template(raw)

    def render_strict(self, invoice: Invoice) -> bytes:
        tpl = self.load_template()
        rows = row_source(invoice)
        params = bind_parameters(invoice, rows)
        try:
            return _build_pdf(tpl, params, rows)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"report '{tpl.name}' failed to render: {e}") from e

    def render(self, invoice: Invoice) -> bytes:
        """
        Fail-soft variant for callers that only want bytes: any rendering
        problem, a bad template included, is logged and yields b"".
        InvoiceService uses render_strict instead so the failure kind
        survives up to generate_report.
        """
        try:
            return self.render_strict(invoice)
        except RenderError as e:
            logger.warning(f"[report] invoice {invoice.id}: {e}")
            return b""
