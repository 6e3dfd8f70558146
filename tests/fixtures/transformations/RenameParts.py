"""Módulo de transformação in-place: prefixa o label de cada Part de INOUT."""

from atlas_transform.core.engine.types import RuleResult, RuleStatus


class RenameParts:
    id = "rename.parts"
    depends_on = []

    def run(self, ctx):
        renamed = 0
        for root in ctx.graph("INOUT").roots:
            for node in root.iter_tree():
                if node.type_name == "Part":
                    node.attributes["label"] = "renamed-" + node.attributes.get("label", "")
                    renamed += 1
        return RuleResult(rule_id=self.id, status=RuleStatus.SUCCESS, summary="renamed", metrics={"renamed": renamed})


class NeverRuns:
    id = "rename.optional"
    depends_on = ["rename.parts"]

    def run(self, ctx):
        raise RuntimeError("must be skipped by config")


RULES = [RenameParts(), NeverRuns()]
