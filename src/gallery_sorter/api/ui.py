"""Single-page gallery UI that consumes the gallery API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def gallery_ui() -> HTMLResponse:
    """Minimal gallery UI for uploading, describing and sorting images."""
    return HTMLResponse(_GALLERY_UI_HTML)


_GALLERY_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Gallery Sorter</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .row { margin-bottom: 1rem; }
      .hidden { display: none; }
      input[type=text] { padding: 0.4rem 0.6rem; width: 320px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      .image-grid, #results { display: flex; flex-wrap: wrap; gap: 1rem; }
      #results.sorted { display: block; }
      .image-card { width: 220px; border: 1px solid #ddd; padding: 0.5rem; }
      .image-card img { width: 100%; }
      .color-swatch { display: inline-block; width: 1rem; height: 1rem; }
      .error { color: #b00020; }
    </style>
  </head>
  <body>
    <h1>Gallery Sorter</h1>
    <div class="row">
      <input id="image-upload" type="file" accept="image/*" multiple />
    </div>
    <div class="row">
      <input id="user-input" type="text" placeholder="Focus (optional)" />
      <button id="generate-btn" disabled>Generate metadata</button>
    </div>
    <div id="sort-controls" class="row hidden">
      <button class="sort-btn" data-sortby="categories">By category</button>
      <button class="sort-btn" data-sortby="colors">By color</button>
      <button class="sort-btn" data-sortby="people">By people</button>
      <button class="sort-btn" data-sortby="description">By scene</button>
    </div>
    <p id="status"></p>
    <div id="results"></div>
    <script>
      let sessionId = null;
      const statusEl = document.getElementById('status');
      const results = document.getElementById('results');
      const generateBtn = document.getElementById('generate-btn');
      const sortControls = document.getElementById('sort-controls');

      function escapeHtml(text) {
        const div = document.createElement('div');
        div.textContent = text == null ? '' : String(text);
        return div.innerHTML;
      }

      function cardHtml(card) {
        let body = '';
        if (card.status === 'ready') {
          const swatches = card.dominant_colors.map(c =>
            `<span class="color-swatch" style="background-color: ${escapeHtml(c)}"
              title="${escapeHtml(c)}"></span>`).join('');
          body = `<p><strong>Description:</strong> ${escapeHtml(card.description)}</p>
            <p><strong>Categories:</strong> ${escapeHtml(card.categories)}</p>
            <div><strong>Colors:</strong> ${swatches}</div>
            <p><strong>Has People:</strong> ${escapeHtml(card.has_people)}</p>`;
        } else if (card.status === 'failed') {
          body = `<p class="error">${escapeHtml(card.error)}</p>`;
        }
        return `<div class="image-card"><img src="${card.preview_url}"
          alt="${escapeHtml(card.description || card.filename)}">${body}</div>`;
      }

      function showCards(data) {
        results.classList.remove('sorted');
        results.innerHTML = data.cards.map(cardHtml).join('');
        if (data.status_text) statusEl.textContent = data.status_text;
      }

      document.getElementById('image-upload').addEventListener('change', async (e) => {
        const files = Array.from(e.target.files);
        if (files.length === 0) return;
        const form = new FormData();
        files.forEach(f => form.append('files', f));
        const url = sessionId ? `/sessions/${sessionId}/images` : '/sessions';
        const res = await fetch(url, { method: sessionId ? 'PUT' : 'POST', body: form });
        const data = await res.json();
        if (!res.ok) { statusEl.textContent = data.detail; return; }
        sessionId = data.session_id;
        sortControls.classList.add('hidden');
        showCards(data);
        generateBtn.disabled = false;
      });

      generateBtn.addEventListener('click', async () => {
        generateBtn.disabled = true;
        statusEl.textContent = `Analyzing ${results.children.length} images...`;
        const focus = document.getElementById('user-input').value.trim();
        const res = await fetch(`/sessions/${sessionId}/metadata`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ focus }),
        });
        showCards(await res.json());
        sortControls.classList.remove('hidden');
      });

      sortControls.addEventListener('click', async (e) => {
        if (!e.target.classList.contains('sort-btn')) return;
        const sortBy = e.target.dataset.sortby;
        statusEl.textContent = `Sorting by ${sortBy}...`;
        sortControls.querySelectorAll('.sort-btn').forEach(b => b.disabled = true);
        try {
          const res = await fetch(`/sessions/${sessionId}/sort`, {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ sort_by: sortBy }),
          });
          const data = await res.json();
          results.classList.add('sorted');
          results.innerHTML = data.message
            ? `<p>${escapeHtml(data.message)}</p>`
            : data.groups.map(g => `<section><h2>${escapeHtml(g.name)}</h2>
                <div class="image-grid">${g.cards.map(cardHtml).join('')}</div></section>`
              ).join('');
          statusEl.textContent = data.status_text;
        } catch (err) {
          statusEl.textContent = 'An error occurred while sorting.';
        } finally {
          sortControls.querySelectorAll('.sort-btn').forEach(b => b.disabled = false);
        }
      });
    </script>
  </body>
</html>
"""
