"""HTML page rendering for the supplier map."""

import json
import logging
from string import Template
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

PAGE_TITLE = "Mapa Fornecedores Brasil"
DEFAULT_CENTER = (-14.2350, -51.9253)
DEFAULT_ZOOM = 4

LEAFLET_CSS = "https://unpkg.com/leaflet/dist/leaflet.css"
LEAFLET_JS = "https://unpkg.com/leaflet/dist/leaflet.js"
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"

# `$$` is a literal dollar sign for string.Template.
_PAGE_TEMPLATE = Template("""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8"/>
<title>$title</title>
<link rel="stylesheet" href="$leaflet_css"/>
<script src="$leaflet_js"></script>

<style>
body { margin:0; font-family: Arial; }
#map { height: 100vh; }

.control-panel {
    position:absolute;
    bottom:20px;
    right:20px;
    z-index:1000;
    background:white;
    padding:10px;
    border-radius:10px;
    box-shadow:0 4px 12px rgba(0,0,0,0.25);
    width:240px;
    max-height:300px;
    overflow-y:auto;
}

.control-panel input,
.control-panel select {
    width:100%;
    padding:6px;
    margin-bottom:8px;
    box-sizing:border-box;
    font-size:14px;
    height:34px;
}
</style>
</head>
<body>

<div class="control-panel">
    <input type="text" id="searchInput" placeholder="Buscar fornecedor...">
    <select id="examFilter">
        <option value="">Filtrar por exame</option>
    </select>
</div>

<div id="map"></div>

<script>

var fornecedores = $data;

var map = L.map('map').setView([$center_lat, $center_lng], $zoom);

L.tileLayer('$tile_url', {
    attribution: '&copy; OpenStreetMap'
}).addTo(map);

var markersLayer = L.layerGroup().addTo(map);

function escapeHtml(value) {
    return String(value)
        .replace(/&/g, '&amp;')
        .replace(/</g, '&lt;')
        .replace(/>/g, '&gt;')
        .replace(/"/g, '&quot;')
        .replace(/'/g, '&#x27;');
}

function parseCoord(value) {
    if (value === null || value === undefined) return null;
    var text = String(value).trim();
    if (text === '') return null;
    var number = Number(text);
    return isFinite(number) ? number : null;
}

function formatAmount(value) {
    return (value === null || value === undefined) ? '-' : String(value);
}

function servicesOf(f) {
    return Array.isArray(f.servicos)
        ? f.servicos.filter(function (s) { return s && typeof s === 'object'; })
        : [];
}

// ===== Dropdown de exames =====
var examesSet = new Set();

fornecedores.forEach(function (f) {
    servicesOf(f).forEach(function (s) { examesSet.add(String(s.servico || '')); });
});

var examSelect = document.getElementById('examFilter');
Array.from(examesSet).sort().forEach(function (exame) {
    var option = document.createElement('option');
    option.value = exame;
    option.text = exame;
    examSelect.appendChild(option);
});

// ===== Marcadores =====
function renderMarkers() {

    markersLayer.clearLayers();

    var searchText = document.getElementById('searchInput').value.toLowerCase();
    var exameSelecionado = document.getElementById('examFilter').value;

    fornecedores.forEach(function (f) {

        var lat = parseCoord(f.endereco_latitude);
        var lng = parseCoord(f.endereco_longitude);

        if (lat === null || lng === null) return;

        var nome = String(f.nome || '');
        if (nome.toLowerCase().indexOf(searchText) === -1) return;

        var examesFiltrados = servicesOf(f);

        if (exameSelecionado) {
            examesFiltrados = examesFiltrados.filter(function (s) {
                return String(s.servico || '') === exameSelecionado;
            });
            if (examesFiltrados.length === 0) return;
        }

        var examesHtml = '';

        examesFiltrados.forEach(function (ex) {
            examesHtml +=
                '<div style="margin-bottom:4px;">' +
                '<b>' + escapeHtml(ex.servico || '') + '</b><br>' +
                'Pagar: R$$ ' + escapeHtml(formatAmount(ex.valor_a_pagar)) + ' | ' +
                'Cobrar: R$$ ' + escapeHtml(formatAmount(ex.valor_a_cobrar)) +
                '</div>';
        });

        var marker = L.circleMarker([lat, lng], { radius: 6 })
        .bindPopup(
            "<div style='max-height:200px; overflow-y:auto; font-size:13px;'>" +
            "<b style='font-size:14px;'>" + escapeHtml(nome) + "</b><br><br>" +
            examesHtml +
            "</div>",
            {
                maxWidth: 260,
                autoPan: true,
                closeButton: true
            }
        );

        markersLayer.addLayer(marker);
    });
}

renderMarkers();

document.getElementById('searchInput').addEventListener('input', renderMarkers);
document.getElementById('examFilter').addEventListener('change', renderMarkers);

</script>
</body>
</html>
""")


def serialize_rows(rows: List[Dict[str, Any]]) -> str:
    """JSON literal safe to drop inside a <script> element."""
    payload = json.dumps(rows, ensure_ascii=False, default=str)
    return payload.replace("</", "<\\/").replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def render_page(rows: List[Dict[str, Any]]) -> str:
    """Render the full map page with `rows` embedded verbatim for the client script."""
    logger.debug("Rendering map page with %d rows", len(rows))
    return _PAGE_TEMPLATE.substitute(
        title=PAGE_TITLE,
        leaflet_css=LEAFLET_CSS,
        leaflet_js=LEAFLET_JS,
        tile_url=TILE_URL,
        data=serialize_rows(rows),
        center_lat=DEFAULT_CENTER[0],
        center_lng=DEFAULT_CENTER[1],
        zoom=DEFAULT_ZOOM,
    )
