"""
Context Prompt Templates

One PromptTemplate per context preset. The base sentence carries literal
placeholder tokens that fill_template() replaces by plain string
substitution; there is no templating language and no escaping.

Tokens: {PRODUCT_TYPE} {MATERIAL_SPECS} {STYLE_DESCRIPTION}
        {CONSTRUCTION_DETAILS} {ENVIRONMENT_TYPE}
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PromptTemplate:
    """Per-context prompt template"""
    base_structure: str
    context_specific: str
    photography_specs: str
    constraints: list[str] = field(default_factory=list)
    quality_requirements: list[str] = field(default_factory=list)


PLACEHOLDER_TOKENS = (
    "{PRODUCT_TYPE}",
    "{MATERIAL_SPECS}",
    "{STYLE_DESCRIPTION}",
    "{CONSTRUCTION_DETAILS}",
    "{ENVIRONMENT_TYPE}",
)


CONTEXT_PROMPT_TEMPLATES: dict[str, PromptTemplate] = {
    "packshot": PromptTemplate(
        base_structure=(
            "Professional commercial packshot of {PRODUCT_TYPE} featuring {MATERIAL_SPECS} in "
            "{STYLE_DESCRIPTION} design aesthetic, showcasing {CONSTRUCTION_DETAILS} with enterprise-grade "
            "construction quality."
        ),
        context_specific=(
            "Studio photography setup with seamless white cyc backdrop, three-point lighting with 5600K "
            "daylight balanced strobes and precision-centered product composition. Catalog photography "
            "standards with macro-level material detail and texture definition."
        ),
        photography_specs=(
            "Three-quarter view angle, eye-level perspective, soft box key light at 45 degrees, fill ratio "
            "3:1, rim light for edge definition."
        ),
        constraints=[
            "Seamless white cyc studio backdrop only",
            "Zero environmental elements or visual distractions",
            "No shadows cast on backdrop - clean product isolation",
        ],
        quality_requirements=[
            "Sharp focus throughout with f/8 aperture",
            "Accurate color reproduction maintaining material undertones",
        ],
    ),
    "lifestyle": PromptTemplate(
        base_structure=(
            "{PRODUCT_TYPE} featuring {MATERIAL_SPECS} in {STYLE_DESCRIPTION} design aesthetic, naturally "
            "integrated within a professionally designed {ENVIRONMENT_TYPE} environment that showcases "
            "{CONSTRUCTION_DETAILS} in authentic usage context."
        ),
        context_specific=(
            "Environmental photography with natural window light and bounce fill, 5000K-5500K daylight "
            "balance. Product placed naturally in a professionally styled interior, supporting furniture "
            "present without competing for attention."
        ),
        photography_specs=(
            "Wide environmental composition, natural lighting with shadow detail, product as clear focal "
            "point, depth of field separating product from background."
        ),
        constraints=[
            "Realistic commercial office or upscale residential environment",
            "Product naturally integrated - no obvious staging",
            "Authentic spatial relationships and proportions",
        ],
        quality_requirements=[
            "Natural daylight balanced lighting with architectural ambiance",
            "Color harmony between product and environment",
        ],
    ),
    "hero": PromptTemplate(
        base_structure=(
            "Dramatic hero banner presentation of {PRODUCT_TYPE} featuring {MATERIAL_SPECS} in "
            "{STYLE_DESCRIPTION} design aesthetic, showcasing {CONSTRUCTION_DETAILS} with high-impact "
            "commercial photography for website header placement."
        ),
        context_specific=(
            "Dramatic directional lighting with architectural or minimalist backdrop. Banner composition with "
            "strategic negative space for text overlay, wide format suitable for responsive web layouts."
        ),
        photography_specs=(
            "Wide banner composition, dramatic key light with architectural shadows, premium textured "
            "backdrop, strong focal point with clear visual hierarchy."
        ),
        constraints=[
            "Wide banner composition",
            "Negative space reserved for text overlay",
            "High-end brand presentation",
        ],
        quality_requirements=[
            "Dramatic lighting that preserves material detail",
            "Professional color grading and tonal balance",
        ],
    ),
    "social_media_square": PromptTemplate(
        base_structure=(
            "Social media optimized presentation of {PRODUCT_TYPE} with {MATERIAL_SPECS} in "
            "{STYLE_DESCRIPTION} design for Instagram engagement."
        ),
        context_specific=(
            "Square format photography for Instagram feeds, professional lifestyle context tuned for mobile "
            "viewing."
        ),
        photography_specs="Square composition, balanced lighting for mobile screens, engagement-focused appeal.",
        constraints=["Square 1:1 aspect ratio composition", "Professional yet approachable aesthetic"],
        quality_requirements=["Thumb-stopping visual appeal for feeds"],
    ),
    "social_media_story": PromptTemplate(
        base_structure=(
            "Vertical mobile-optimized presentation of {PRODUCT_TYPE} with {MATERIAL_SPECS} in "
            "{STYLE_DESCRIPTION} design for social media story format."
        ),
        context_specific=(
            "Vertical 9:16 composition for mobile story formats, product prominently displayed for quick "
            "visual impact."
        ),
        photography_specs="Vertical composition, mobile-optimized lighting, story format clarity.",
        constraints=["Vertical 9:16 aspect ratio format", "Clean, uncluttered vertical composition"],
        quality_requirements=["Mobile device viewing clarity"],
    ),
    "detail": PromptTemplate(
        base_structure=(
            "Close-up craftsmanship photography of {PRODUCT_TYPE} showcasing {MATERIAL_SPECS} and "
            "{CONSTRUCTION_DETAILS} in {STYLE_DESCRIPTION} design."
        ),
        context_specific=(
            "Macro-level detail photography of material textures, construction quality and craftsmanship "
            "indicators."
        ),
        photography_specs="Macro lens detail, texture emphasis lighting, construction detail clarity.",
        constraints=["Macro-level focus on materials and construction", "Sharp focus on grains and finishes"],
        quality_requirements=["Material texture and grain visibility"],
    ),
}


def get_template(context: str) -> PromptTemplate:
    return CONTEXT_PROMPT_TEMPLATES.get(context, CONTEXT_PROMPT_TEMPLATES["packshot"])


def fill_template(template: str, values: dict[str, str]) -> str:
    """Replace each ``{TOKEN}`` with its value by literal substitution.

    Keys may be given with or without braces. Unknown tokens are left as is.
    """
    result = template
    for key, value in values.items():
        token = key if key.startswith("{") else "{" + key + "}"
        result = result.replace(token, value)
    return result
