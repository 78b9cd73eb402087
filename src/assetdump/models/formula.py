"""Formula model: the declarative recipe of an asset."""

from pydantic import BaseModel, ConfigDict, Field


class FormulaOptions(BaseModel):
    """Per-asset options.

    Attributes:
        debug: Overrides the registry's global debug flag when set.
    """

    model_config = ConfigDict(extra="forbid")

    debug: bool | None = Field(default=None, description="Per-asset debug override")


class Formula(BaseModel):
    """How an asset is built.

    Attributes:
        inputs: Source paths or glob patterns, or ``@name`` references.
        filters: Names of built-in filters applied to the content.
        output: Target path template, ``*`` is replaced by the asset name.
        options: Per-asset options.
    """

    model_config = ConfigDict(extra="forbid")

    inputs: list[str] = Field(default_factory=list, description="Inputs and @references")
    filters: list[str] = Field(default_factory=list, description="Filter names")
    output: str | None = Field(default=None, description="Target path template")
    options: FormulaOptions = Field(default_factory=FormulaOptions)

    def fingerprint(self) -> str:
        """Serialize the formula into a comparable string."""
        return self.model_dump_json()

    def target_path(self, name: str) -> str:
        """Resolve the output template for the asset called ``name``."""
        if not self.output:
            return name
        return self.output.replace("*", name)
