"""
Company conversation profile model for CallScript.

Holds the per-company values substituted into response templates
(company name, representative, service description, ...) and the
company's template overrides. Loaded by the company configuration
store and handed to the dialogue engine on every turn.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cs_common.models.conversation import TENANT_EDITABLE_TEMPLATES, TemplateName


class ConversationProfile(BaseModel):
    """Per-company script settings.

    Attributes:
        company_name: Calling company's name.
        service_name: Name of the service being introduced.
        representative_name: Name the agent introduces itself with.
        target_department: Department the call is aimed at.
        target_person: How the wanted person is addressed.
        service_description: Short description spliced into the pitch.
        self_introduction: Full self introduction; derived from company
            and representative names when empty.
        custom_templates: Company overrides keyed by template name; only
            tenant-editable templates may be overridden.
    """

    model_config = ConfigDict(frozen=True)

    company_name: str = Field(default="", description="Calling company's name.")
    service_name: str = Field(default="", description="Service being introduced.")
    representative_name: str = Field(default="", description="Agent's introduced name.")
    target_department: str = Field(default="営業部", description="Target department.")
    target_person: str = Field(default="担当者さま", description="Addressee.")
    service_description: str = Field(default="", description="Service description.")
    self_introduction: str = Field(default="", description="Self introduction.")
    custom_templates: dict[TemplateName, str] = Field(
        default_factory=dict,
        description="Template overrides keyed by template name.",
    )

    @model_validator(mode="after")
    def _check_editable_templates(self) -> ConversationProfile:
        """Reject overrides of templates companies may not edit."""
        locked = sorted(name.value for name in self.custom_templates if name not in TENANT_EDITABLE_TEMPLATES)
        if locked:
            raise ValueError(f"Templates not editable per company: {', '.join(locked)}")
        return self

    def to_context(self) -> dict[str, str]:
        """Build the placeholder substitution map for this profile."""
        self_introduction = self.self_introduction or (
            f"{self.company_name}の{self.representative_name}"
            if self.company_name or self.representative_name
            else ""
        )
        return {
            "companyName": self.company_name,
            "serviceName": self.service_name,
            "representativeName": self.representative_name,
            "targetDepartment": self.target_department,
            "targetPerson": self.target_person,
            "serviceDescription": self.service_description,
            "selfIntroduction": self_introduction,
        }

    def template_overrides(self) -> dict[str, str]:
        """Return the custom templates with text, keyed by plain name."""
        return {name.value: text for name, text in self.custom_templates.items() if text.strip()}
