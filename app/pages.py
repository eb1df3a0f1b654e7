# app/pages.py
"""
Server-rendered HTML pages.

- GET /              : list view (``q``, ``sort``, ``layout`` and repeated ``failed`` params)
- GET /title/{name}  : detail view; unknown titles get the "not found" page

Image URLs that failed to load travel as ``failed`` query parameters on
every in-site link (and in ``sessionStorage``), so a failed image is
shown as a placeholder for the rest of the session instead of being
fetched again.

Pages are built from small HTML fragments with every catalogue value
escaped. The image preview overlay on the detail page posts its events
to ``/api/view/preview`` and applies the returned state, so pan and
zoom limits are enforced in one place.
"""

from __future__ import annotations

import html
import logging
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from .catalog.query import search_titles, sort_titles
from .config import LayoutMode, Settings, SortMode, get_settings
from .storage import TitleCatalog, get_catalog
from .view.detail import resolve_detail
from .view.layouts import Card, LayoutView, format_date, project_layout
from .view.state import ViewState, record_image_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

SORT_OPTIONS = (("date", "时间", "📅"), ("name", "名称", "🔤"), ("random", "随机", "🎲"))
LAYOUT_OPTIONS = (("masonry", "瀑布流", "⚏"), ("grid", "网格", "⊞"), ("list", "列表", "☰"))

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="zh-CN">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{TITLE}}</title>
<style>
body { font-family: system-ui, sans-serif; margin: 0; background: #f8fafc; color: #1f2937; }
header, main, footer { max-width: 1200px; margin: 0 auto; padding: 16px; }
.controls a { margin-right: 8px; }
.controls a.active { font-weight: bold; color: #7c3aed; }
.masonry { display: flex; gap: 16px; align-items: flex-start; }
.masonry .column { flex: 1; display: flex; flex-direction: column; gap: 16px; }
.grid .row { display: grid; grid-template-columns: repeat(var(--cols), 1fr); gap: 16px; margin-bottom: 16px; }
.card { background: #fff; border-radius: 12px; padding: 12px; box-shadow: 0 2px 8px rgba(0,0,0,.08); }
.card img { width: 100%; border-radius: 8px; }
.placeholder { background: #ede9fe; border-radius: 8px; height: 120px; display: flex; align-items: center; justify-content: center; font-size: 2em; }
.list .card { display: flex; gap: 12px; margin-bottom: 12px; }
#preview { position: fixed; inset: 0; background: rgba(0,0,0,.85); display: none; align-items: center; justify-content: center; }
#preview.open { display: flex; }
#preview img { max-width: 90vw; max-height: 80vh; cursor: grab; }
#preview .tools { position: absolute; bottom: 24px; color: #fff; }
</style>
</head>
<body>
{{BODY}}
<footer><h3>{{SITE}}</h3><p>© 2025 • 共收录 {{COUNT}} 个称号 • 持续更新中</p></footer>
</body>
</html>
"""

FAILED_KEY = "failedImages"

# Runs as the img onerror handler: remembers the URL for the session and shows the placeholder.
IMAGE_FALLBACK = (
    "var f=JSON.parse(sessionStorage.getItem('" + FAILED_KEY + "')||'[]'),s=this.getAttribute('src');"
    "if(f.indexOf(s)<0){f.push(s);sessionStorage.setItem('" + FAILED_KEY + "',JSON.stringify(f));}"
    "this.replaceWith(Object.assign(document.createElement('div'), {className: 'placeholder', textContent: '🏷️'}))"
)

LIST_SCRIPT = """<script>
(function () {
  var state = JSON.parse(document.getElementById('view-state').textContent);
  var pending = Promise.resolve(state);
  var form = document.getElementById('search-form');
  var input = document.getElementById('search');
  var list = document.getElementById('suggestions');
  var backToTop = document.getElementById('back-to-top');
  function post(action) {
    return fetch('/api/view/state', {method: 'POST', headers: {'Content-Type': 'application/json'},
      body: JSON.stringify({state: state, action: action})})
      .then(function (r) { return r.json(); })
      .then(function (next) { state = next; render(); return state; });
  }
  // One request at a time, each posting the state the previous reply produced.
  function step(action) {
    pending = pending.then(function () { return post(action); }).catch(function () { return state; });
    return pending;
  }
  function carryFailures() {
    sessionStorage.setItem('{{FAILED_KEY}}', JSON.stringify(state.image_errors));
    document.querySelectorAll('a[data-carry]').forEach(function (a) {
      var url = new URL(a.getAttribute('href'), location.href);
      url.searchParams.delete('failed');
      state.image_errors.forEach(function (src) { url.searchParams.append('failed', src); });
      a.setAttribute('href', url.pathname + url.search);
    });
    form.querySelectorAll('input[name="failed"]').forEach(function (el) { el.remove(); });
    state.image_errors.forEach(function (src) {
      form.appendChild(Object.assign(document.createElement('input'), {type: 'hidden', name: 'failed', value: src}));
    });
    document.querySelectorAll('main img').forEach(function (img) {
      if (state.image_errors.indexOf(img.getAttribute('src')) >= 0) {
        img.replaceWith(Object.assign(document.createElement('div'), {className: 'placeholder', textContent: '🏷️'}));
      }
    });
  }
  function render() {
    list.innerHTML = '';
    (state.suggestions || []).forEach(function (title) {
      var li = document.createElement('li');
      var a = document.createElement('a');
      a.href = '/title/' + encodeURIComponent(title);
      a.textContent = title;
      li.appendChild(a);
      list.appendChild(li);
    });
    document.body.classList.toggle('compact', !!state.compact_header);
    backToTop.hidden = !state.show_back_to_top;
    carryFailures();
  }
  input.addEventListener('input', function () {
    step({type: 'set_search', text: input.value}).then(function (s) {
      var token = s.suggestion_token;
      setTimeout(function () {
        if (token !== state.suggestion_token) { return; }
        fetch('/api/catalog/suggestions?q=' + encodeURIComponent(input.value))
          .then(function (r) { return r.json(); })
          .then(function (data) { step({type: 'apply_suggestions', token: token, suggestions: data.suggestions}); });
      }, {{DEBOUNCE_MS}});
    });
  });
  document.addEventListener('error', function (e) {
    if (e.target.tagName === 'IMG') { step({type: 'image_failed', url: e.target.getAttribute('src')}); }
  }, true);
  var ticking = false;
  window.addEventListener('scroll', function () {
    if (ticking) { return; }
    ticking = true;
    requestAnimationFrame(function () { ticking = false; step({type: 'scroll', offset: window.scrollY}); });
  });
  backToTop.addEventListener('click', function (e) { e.preventDefault(); window.scrollTo({top: 0, behavior: 'smooth'}); });
  JSON.parse(sessionStorage.getItem('{{FAILED_KEY}}') || '[]').forEach(function (src) {
    if (state.image_errors.indexOf(src) < 0) { step({type: 'image_failed', url: src}); }
  });
  render();
})();
</script>"""

PREVIEW_SCRIPT = """<script>
(function () {
  var state = {};
  var pending = Promise.resolve(state);
  var overlay = document.getElementById('preview');
  var img = document.getElementById('preview-image');
  var label = document.getElementById('zoom-label');
  function render() {
    overlay.classList.toggle('open', !!state.is_open);
    document.body.style.overflow = state.is_open ? 'hidden' : '';
    img.style.transform = 'translate(' + (state.x || 0) + 'px,' + (state.y || 0) + 'px) scale(' + (state.scale || 1) + ')';
    label.textContent = (state.zoom_percent || 100) + '%';
  }
  function send(action) {
    pending = pending.then(function () {
      return fetch('/api/view/preview', {method: 'POST', headers: {'Content-Type': 'application/json'},
        body: JSON.stringify({state: state, action: action})})
        .then(function (r) { return r.json(); })
        .then(function (next) { state = next; render(); return state; });
    }).catch(function () { return state; });
  }
  document.querySelectorAll('[data-preview]').forEach(function (el) {
    el.addEventListener('click', function (e) {
      var action = {type: el.dataset.preview};
      if (action.type === 'backdrop_click') { action.on_image = e.target === img; }
      e.stopPropagation();
      send(action);
    });
  });
  document.addEventListener('keydown', function (e) { if (state.is_open) { send({type: 'key', key: e.key}); } });
  overlay.addEventListener('wheel', function (e) { e.preventDefault(); send({type: 'wheel', delta_y: e.deltaY}); }, {passive: false});
  img.addEventListener('mousedown', function (e) { e.preventDefault(); send({type: 'drag_start', x: e.clientX, y: e.clientY}); });
  document.addEventListener('mousemove', function (e) { if (state.dragging) { send({type: 'drag_move', x: e.clientX, y: e.clientY}); } });
  document.addEventListener('mouseup', function () { if (state.dragging) { send({type: 'drag_end'}); } });
})();
</script>"""


def _page(title: str, body: str, settings: Settings, catalog: TitleCatalog) -> str:
    return (
        PAGE_TEMPLATE.replace("{{TITLE}}", html.escape(title))
        .replace("{{SITE}}", html.escape(settings.site_title))
        .replace("{{COUNT}}", str(len(catalog)))
        .replace("{{BODY}}", body)
    )


def _with_failed(href: str, failed: List[str]) -> str:
    if not failed:
        return href
    return href + ("&" if "?" in href else "?") + urlencode({"failed": failed}, doseq=True)


def _card_html(card: Card, failed: List[str]) -> str:
    if card.image:
        media = f'<img src="{html.escape(card.image)}" alt="{html.escape(card.title)}" loading="lazy" onerror="{html.escape(IMAGE_FALLBACK)}">'
    else:
        media = '<div class="placeholder">🏷️</div>'
    return (
        f'<article class="card" style="--delay:{card.position * 50}ms">{media}'
        f'<div><h3><a href="{html.escape(_with_failed(card.href, failed))}" data-carry>{html.escape(card.title)}</a></h3>'
        f'<time datetime="{html.escape(card.date)}">📅 {html.escape(card.date_label)}</time>'
        f"<p>{html.escape(card.description)}</p></div></article>"
    )


def _layout_html(view: LayoutView, columns: int, failed: List[str]) -> str:
    if view.layout == "masonry":
        inner = "".join(
            '<div class="column">' + "".join(_card_html(c, failed) for c in column) + "</div>" for column in view.columns
        )
        return f'<section class="masonry">{inner}</section>'
    if view.layout == "grid":
        inner = "".join('<div class="row">' + "".join(_card_html(c, failed) for c in row) + "</div>" for row in view.rows)
        return f'<section class="grid" style="--cols:{columns}">{inner}</section>'
    return '<section class="list">' + "".join(_card_html(c, failed) for c in view.items) + "</section>"


def _toggle_links(options, current: str, param: str, state: ViewState) -> str:
    links = []
    for value, label, icon in options:
        params = {"q": state.search_text, "sort": state.sort, "layout": state.layout, param: value}
        query = urlencode({k: v for k, v in params.items() if v})
        href = html.escape(_with_failed(f"/?{query}", state.image_errors))
        css = ' class="active"' if value == current else ""
        links.append(f'<a href="{href}" data-carry{css}>{icon} {label}</a>')
    return "".join(links)


def _initial_state(q: str, sort: SortMode, layout: LayoutMode, failed: List[str]) -> ViewState:
    state = ViewState(search_text=q, sort=sort, layout=layout)
    for url in failed:
        state = record_image_error(state, url)
    return state


@router.get("/", response_class=HTMLResponse)
def list_page(
    q: str = Query(default=""),
    sort: Optional[SortMode] = Query(default=None),
    layout: Optional[LayoutMode] = Query(default=None),
    failed: List[str] = Query(default=[], description="加载失败的图片地址"),
    catalog: TitleCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    state = _initial_state(q, sort or settings.default_sort, layout or settings.default_layout, failed)
    results = sort_titles(search_titles(catalog, q), state.sort, seed=catalog.fingerprint)
    columns = settings.masonry_columns if state.layout == "masonry" else settings.grid_columns
    view = project_layout(results, state.layout, image_errors=state.image_errors, columns=columns)

    if q:
        count = f'找到 <strong>{view.total}</strong> 个称号 <span>关键词: &ldquo;{html.escape(q)}&rdquo;</span>'
    else:
        count = f"共有 <strong>{view.total}</strong> 个称号"

    if view.total == 0:
        content = (
            '<div class="empty"><div>🤔</div><h3>没有找到相关称号</h3><p>试试其他关键词吧</p>'
            f'<a href="{html.escape(_with_failed("/", state.image_errors))}" data-carry>查看全部称号</a></div>'
        )
    else:
        content = _layout_html(view, columns, state.image_errors)

    hidden_failed = "".join(
        f'<input type="hidden" name="failed" value="{html.escape(url)}">' for url in state.image_errors
    )
    # "</" cannot appear inside a script element.
    state_json = state.model_dump_json().replace("</", "<\\/")
    body = (
        f"<header><h1>{html.escape(settings.site_title)}</h1>"
        "<p>探索传奇人物的精彩称号宇宙 • 每个名字背后都有一个故事</p>"
        '<form id="search-form" method="get" action="/">'
        f'<input type="text" id="search" name="q" value="{html.escape(q)}" placeholder="搜索称号或描述..." autocomplete="off">'
        f'<input type="hidden" name="sort" value="{state.sort}"><input type="hidden" name="layout" value="{state.layout}">'
        f"{hidden_failed}"
        '<ul id="suggestions"></ul>'
        "</form>"
        f'<div class="controls">排序: {_toggle_links(SORT_OPTIONS, state.sort, "sort", state)}'
        f' 布局: {_toggle_links(LAYOUT_OPTIONS, state.layout, "layout", state)}</div>'
        f"<p>{count}</p></header>"
        f"<main>{content}</main>"
        '<a id="back-to-top" href="#" hidden>↑</a>'
        f'<script type="application/json" id="view-state">{state_json}</script>'
        + LIST_SCRIPT.replace("{{DEBOUNCE_MS}}", str(settings.suggestion_debounce_ms)).replace(
            "{{FAILED_KEY}}", FAILED_KEY
        )
    )
    return HTMLResponse(_page(settings.site_title, body, settings, catalog))


@router.get("/title/{name:path}", response_class=HTMLResponse)
def detail_page(
    name: str,
    failed: List[str] = Query(default=[], description="加载失败的图片地址"),
    catalog: TitleCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    detail = resolve_detail(catalog, name)
    home = html.escape(_with_failed("/", failed))
    if not detail.found:
        logger.info("Unknown title requested: %r", name)
        body = (
            '<main class="not-found"><div>🤔</div><h1>未找到该称号</h1>'
            f"<p>这个称号暂时没有记录：{html.escape(detail.title)}</p>"
            f'<a href="{home}">返回首页</a></main>'
        )
        return HTMLResponse(_page(f"未找到该称号 - {settings.site_title}", body, settings, catalog))

    record = detail.record
    image_block = ""
    preview_block = ""
    if record.image and record.image in failed:
        image_block = '<div class="card"><div class="placeholder">🏷️</div></div>'
    elif record.image:
        src = html.escape(record.image)
        image_block = (
            f'<div class="card" data-preview="open"><img src="{src}" alt="{html.escape(detail.title)}" '
            f'onerror="{html.escape(IMAGE_FALLBACK)}"></div>'
        )
        preview_block = (
            '<div id="preview" data-preview="backdrop_click">'
            f'<img id="preview-image" src="{src}" alt="{html.escape(detail.title)}">'
            '<div class="tools">'
            '<button data-preview="zoom_in">＋</button><button data-preview="zoom_out">－</button>'
            '<button data-preview="reset">⟲</button><button data-preview="close">✕</button>'
            '<span id="zoom-label">100%</span></div></div>' + PREVIEW_SCRIPT
        )

    body = (
        f'<header><a href="{home}">← 返回首页</a></header>'
        f"<main><h1>{html.escape(detail.title)}</h1>"
        f'<time datetime="{html.escape(record.date)}">📅 {html.escape(format_date(record.date))}</time>'
        f"{image_block}<section><h2>称号故事</h2><p>{html.escape(record.description)}</p></section>"
        f'<a href="{home}">探索更多称号</a></main>'
        f"{preview_block}"
    )
    return HTMLResponse(_page(f"{detail.title} - {settings.site_title}", body, settings, catalog))
