from fastapi import FastAPI

from techmap.config import AppConfig, configure_logging, load_config
from techmap.features.associations.api import router as associations_router
from techmap.features.associations.resolver import resolve_technique_associations
from techmap.features.techniques.api import router as techniques_router
from techmap.infra.corpus_files import load_associations, load_criteria, load_techniques
from techmap.web.health import router as health_router


def create_app(cfg: AppConfig | None = None) -> FastAPI:
    """Build the service from the corpus in `cfg.data_dir`.

    Serve with `uvicorn techmap.main:create_app --factory`.
    """
    cfg = cfg or load_config()
    configure_logging(cfg.log_level)

    criteria = load_criteria(cfg.criteria_path, version=cfg.wcag_version)
    sc_numbers = [c.num for c in criteria.values() if c.is_success_criterion]
    registry = load_techniques(cfg.techniques_path, sc_numbers=sc_numbers)
    # SchemaError propagates: a malformed corpus aborts startup.
    index = resolve_technique_associations(load_associations(cfg.associations_path), criteria)

    app = FastAPI(title="Technique associations", version="0.1.0")
    app.state.cfg = cfg
    app.state.registry = registry
    app.state.index = index
    app.include_router(health_router)
    app.include_router(techniques_router)
    app.include_router(associations_router)
    return app
