"""Template reconciliation: create when absent, overwrite only when forced.

Unlike indices, existing templates are never compared with their declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import TemplateDecision

if TYPE_CHECKING:
    from indexsync.domain.declarations import TemplateDeclaration
    from indexsync.domain.ports import TemplateGateway

log = getLogger(__name__)


@dataclass(slots=True)
class TemplateReconciler:
    gateway: TemplateGateway

    def reconcile(
        self, declaration: TemplateDeclaration, *, force: bool = False
    ) -> TemplateDecision:
        name = declaration.name
        if not self.gateway.template_exists(name):
            log.info("Template [%s] doesn't exist. Creating it.", name)
            self.gateway.put_template(name, declaration.raw_json)
            return TemplateDecision.CREATE

        if force:
            log.warning("Template [%s] already exists but force is set. Overwriting it.", name)
            self.gateway.put_template(name, declaration.raw_json)
            return TemplateDecision.OVERWRITE

        log.info("Template [%s] already exists. Leaving it untouched.", name)
        return TemplateDecision.NO_OP
