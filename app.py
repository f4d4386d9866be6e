# --- START OF FILE app.py ---

# =============================================================================
# EXAM TEMPLATE CATALOG API
# =============================================================================
# This Flask application exposes the catalog engine over HTTP: catalog search
# and laterality resolution for the exam request workflow, plus template
# import, seeding and deduplication jobs for administrators.

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from catalog_builder import build_catalog
from catalog_data import EXAM_CATALOG
from catalog_index import CatalogIndexHolder
from config_manager import get_config
from database_models import StorageError, TemplateStore
from exam_intake import resolve_catalog_selection, resolve_free_text
from ingestion import import_documents, run_deduplication, seed_templates, DEDUP_MODES
from laterality_resolver import extract_laterality
from logging_config import setup_logging
from template_models import CatalogEntry, Side

setup_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app,
     methods=['GET', 'POST', 'DELETE', 'OPTIONS'],
     allow_headers=['Content-Type', 'Authorization'],
     supports_credentials=False)

# Global component instances
template_store: Optional[TemplateStore] = None
index_holder = CatalogIndexHolder()
_init_lock = threading.Lock()
_app_initialized = False


def _initialize_app():
    """Opens the template store and loads the static catalog index."""
    global template_store, _app_initialized
    db_path = app.config.get('CATALOG_DB_PATH') or get_config().get('storage.db_path', 'exam_catalog.db')
    logger.info(f"Initializing catalog engine (store: {db_path})")
    template_store = TemplateStore(db_path)
    index_holder.rebuild(EXAM_CATALOG)
    _app_initialized = True


def _ensure_app_is_initialized():
    """Initializes components once, on the first request that needs them."""
    if _app_initialized:
        return
    with _init_lock:
        if not _app_initialized:
            _initialize_app()


def _parse_side(value: Optional[str]) -> Side:
    if not value:
        return Side.NONE
    try:
        return Side(value.lower())
    except ValueError:
        raise ValueError(f"Invalid side '{value}'; expected one of {[s.value for s in Side]}")


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint for monitoring service availability"""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now().isoformat(),
        'app_initialized': _app_initialized
    })


@app.route('/catalog/<modality>/regions', methods=['GET'])
def catalog_regions(modality):
    _ensure_app_is_initialized()
    regions = index_holder.current().regions_for(modality)
    return jsonify({'modality': modality.upper(), 'regions': [r.to_dict() for r in regions]})


@app.route('/catalog/search', methods=['GET'])
def catalog_search():
    """Substring search; an empty result carries fuzzy suggestions and means 'custom exam'."""
    _ensure_app_is_initialized()
    modality = request.args.get('modality')
    if not modality:
        return jsonify({"error": "Missing modality parameter"}), 400
    query = request.args.get('q', '')
    region = request.args.get('region') or None

    index = index_holder.current()
    hits = index.search(modality, query, region)
    response = {'results': [h.to_dict() for h in hits], 'custom': not hits}
    if not hits:
        cfg = get_config()
        suggestions = index.suggest(modality, query,
                                    limit=cfg.get('search.suggestion_limit', 5),
                                    min_score=cfg.get('search.suggestion_min_score', 60),
                                    region=region)
        response['suggestions'] = [s.to_dict() for s in suggestions]
    return jsonify(response)


@app.route('/laterality', methods=['POST'])
def laterality():
    data = request.get_json(silent=True) or {}
    if 'exam_name' not in data:
        return jsonify({"error": "Missing exam_name in request data"}), 400
    return jsonify(extract_laterality(data['exam_name']).to_dict())


@app.route('/resolve', methods=['POST'])
def resolve_exam():
    """
    Resolves an exam request. Either `exam_name` (free text) or `entry`
    (a catalog entry picked by the user) plus an optional `side`.
    """
    _ensure_app_is_initialized()
    data = request.get_json(silent=True) or {}
    modality = data.get('modality')
    if not modality:
        return jsonify({"error": "Missing modality in request data"}), 400
    try:
        side = _parse_side(data.get('side'))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        if data.get('entry'):
            entry_data = data['entry']
            entry = CatalogEntry(name=entry_data['name'],
                                 has_laterality=bool(entry_data.get('hasLaterality', False)),
                                 region_name=entry_data.get('regionName', ''),
                                 modality=entry_data.get('modality', modality).upper())
            result = resolve_catalog_selection(entry, side)
        elif data.get('exam_name'):
            result = resolve_free_text(data['exam_name'], modality, index_holder.current(),
                                       region=data.get('region'))
        else:
            return jsonify({"error": "Provide exam_name or entry"}), 400
    except KeyError as e:
        return jsonify({"error": f"Missing field {e} in entry"}), 400

    return jsonify(result.to_dict())


@app.route('/templates', methods=['GET'])
def list_templates():
    _ensure_app_is_initialized()
    try:
        templates = template_store.list_templates(modality=request.args.get('modality'),
                                                  search=request.args.get('search'))
        return jsonify([t.to_dict() for t in templates])
    except StorageError as e:
        logger.error(f"Error listing templates: {e}", exc_info=True)
        return jsonify({"error": "Failed to list templates"}), 500


@app.route('/templates/catalog', methods=['GET'])
def templates_catalog():
    """Catalog derived from stored templates; `?apply=true` also swaps it into the search index."""
    _ensure_app_is_initialized()
    try:
        catalog = build_catalog(template_store.find_all_active())
    except StorageError as e:
        logger.error(f"Error building catalog: {e}", exc_info=True)
        return jsonify({"error": "Failed to build catalog"}), 500
    if request.args.get('apply', '').lower() in ('true', '1', 'yes'):
        index_holder.rebuild(catalog)
    return jsonify({modality: [g.to_dict() for g in groups] for modality, groups in catalog.items()})


def _resolve_import_paths(paths) -> List[str]:
    """
    Resolves requested document paths against the templates directory.

    Relative paths are taken from that directory; anything resolving outside
    of it raises ValueError.
    """
    base = Path(app.config.get('TEMPLATES_DIR') or get_config().get('storage.templates_dir', 'templates')).resolve()
    resolved = []
    for path in paths:
        if not isinstance(path, str) or not path:
            raise ValueError("Document paths must be non-empty strings")
        candidate = (base / path).resolve()
        try:
            candidate.relative_to(base)
        except ValueError:
            raise ValueError(f"Path '{path}' is outside the templates directory")
        resolved.append(str(candidate))
    return resolved


@app.route('/templates/import', methods=['POST'])
def import_templates():
    """Imports documents found below the configured templates directory."""
    _ensure_app_is_initialized()
    data = request.get_json(silent=True) or {}
    paths = data.get('paths')
    if not paths or not isinstance(paths, list):
        return jsonify({"error": "Missing paths list in request data"}), 400
    try:
        resolved = _resolve_import_paths(paths)
    except ValueError as e:
        logger.warning(f"Rejected import request: {e}")
        return jsonify({"error": str(e)}), 400
    summary = import_documents(resolved, template_store)
    return jsonify(summary.to_dict())


@app.route('/templates/seed', methods=['POST'])
def seed():
    _ensure_app_is_initialized()
    try:
        return jsonify({'success': True, 'seeded': seed_templates(template_store)})
    except StorageError as e:
        logger.error(f"Error seeding templates: {e}", exc_info=True)
        return jsonify({"error": "Failed to seed templates"}), 500


@app.route('/templates/dedupe', methods=['POST'])
def dedupe():
    _ensure_app_is_initialized()
    data = request.get_json(silent=True) or {}
    mode = data.get('mode', 'fuzzy')
    if mode not in DEDUP_MODES:
        return jsonify({"error": f"Unknown mode '{mode}'"}), 400
    try:
        return jsonify(run_deduplication(template_store, mode).to_dict())
    except StorageError as e:
        logger.error(f"Deduplication failed: {e}", exc_info=True)
        return jsonify({"error": "Deduplication failed"}), 500


@app.route('/templates/<template_id>', methods=['DELETE'])
def delete_template(template_id):
    """Soft delete."""
    _ensure_app_is_initialized()
    try:
        if not template_store.deactivate(template_id):
            return jsonify({"error": "Template not found"}), 404
        return jsonify({'success': True})
    except StorageError as e:
        logger.error(f"Error deleting template: {e}", exc_info=True)
        return jsonify({"error": "Failed to delete template"}), 500


@app.route('/config/reload', methods=['POST'])
def reload_config():
    """Reload configuration from its sources."""
    try:
        get_config().reload()
        return jsonify({'message': 'Configuration reloaded', 'timestamp': datetime.now().isoformat()})
    except Exception as e:
        logger.error(f"Config reload endpoint error: {e}", exc_info=True)
        return jsonify({"error": "Failed to reload configuration"}), 500


if __name__ == '__main__':
    cfg = get_config()
    app.run(host=cfg.get('api.host', '0.0.0.0'), port=cfg.get('api.port', 10000), debug=cfg.get('api.debug', False))

# --- END OF FILE app.py ---
