"""Script generator: per-platform templates to a timed Timeline.

Produces the four-part script (hook, demo, social proof, call to action),
a post caption and a hashtag list from a few product fields. Pure string
templating over the static SOCIAL_TEMPLATES table.
"""

import re
from dataclasses import dataclass

from .timeline import ScriptSegment, Timeline


HASHTAG_LIMIT = 6

DEFAULT_NETWORK = "instagram"
DEFAULT_PRODUCT = "Produto inovador"
DEFAULT_BENEFITS = "resultado rápido, experiência premium, confiança garantida"
DEFAULT_BRAND = "Marca destaque"
DEFAULT_AUDIENCE = "pessoas que buscam transformar o dia a dia"


@dataclass(frozen=True)
class SocialTemplate:
    """Static configuration for one social network format."""

    id: str
    label: str
    orientation: str
    default_duration: float
    tone: str
    hook_style: str
    intro: str
    body: str
    proof: str
    call_to_action: str
    hashtags: tuple[str, ...]
    notes: tuple[str, ...]


SOCIAL_TEMPLATES = {
    "instagram": SocialTemplate(
        id="instagram",
        label="Instagram Reels",
        orientation="portrait",
        default_duration=28,
        tone="Vibrante, rápido e aspiracional",
        hook_style="Pergunta direta ou promessa ousada em até 5 palavras.",
        intro="Abertura com close do produto e benefício imediato.",
        body="Transição rápida destacando os diferenciais com cortes ágeis.",
        proof="Exibição rápida de prova social ou depoimento curto.",
        call_to_action="Convite para experimentar com incentivo ao link na bio ou sticker.",
        hashtags=("#descobertareels", "#tendencia", "#novidade", "#inovacao", "#paravoce"),
        notes=(
            "Legendas grandes e com alto contraste.",
            "Adicionar stickers e setas indicando o produto.",
        ),
    ),
    "tiktok": SocialTemplate(
        id="tiktok",
        label="TikTok Short",
        orientation="portrait",
        default_duration=20,
        tone="Autêntico, dinâmico e direto ao ponto",
        hook_style="Começa com uma reação ou algo surpreendente.",
        intro="Comece com uma pergunta ousada ou trend visual.",
        body="Demonstrar o produto com cortes rápidos e ângulos diferentes.",
        proof="Mostrar resultado antes/depois ou expressão genuína.",
        call_to_action="Encerrar com chamada para seguir e clicar no link do perfil.",
        hashtags=("#fyp", "#paravoce", "#tiktokmefezcomprar", "#descobertas", "#inspiracao"),
        notes=(
            "Use texto na tela sincronizado com a fala.",
            "Inclua movimento constante ou zoom in/out.",
        ),
    ),
    "youtube": SocialTemplate(
        id="youtube",
        label="YouTube Shorts",
        orientation="portrait",
        default_duration=45,
        tone="Educativo, confiante e com storytelling leve",
        hook_style="Promessa forte com números ou benefício concreto.",
        intro="Headline clara com forte benefício visual.",
        body="Explique em até dois pontos principais e uma história rápida.",
        proof="Traga credibilidade com uma prova social ou dado.",
        call_to_action="Convite para acessar o link fixado na descrição ou comentários.",
        hashtags=("#shorts", "#reviewrapida", "#produtodoano", "#dicaexpress", "#imperdivel"),
        notes=(
            "Sugestão de usar lower-third com título dos tópicos.",
            "Ritmo de cortes mais espaçados para permitir absorção.",
        ),
    ),
    "linkedin": SocialTemplate(
        id="linkedin",
        label="LinkedIn Vertical",
        orientation="portrait",
        default_duration=60,
        tone="Profissional, inspirador e orientado a resultados",
        hook_style="Pergunta estratégica ou insight estatístico.",
        intro="Contextualize o problema de forma profissional.",
        body="Destaque o produto como solução com foco em ROI.",
        proof="Apresente dados, cases ou depoimentos corporativos.",
        call_to_action="Convite para conectar, agendar demo ou acessar o artigo completo.",
        hashtags=("#inovacao", "#transformacaodigital", "#casesucesso", "#growth", "#tendencias"),
        notes=(
            "Use subtítulos com dados concretos.",
            "Mantenha ritmo mais calmo e profissional.",
        ),
    ),
}


def get_template(network: str) -> SocialTemplate:
    """Template for a network; unknown networks fall back to Instagram."""
    return SOCIAL_TEMPLATES.get(network, SOCIAL_TEMPLATES[DEFAULT_NETWORK])


def _benefit_parts(benefits: str) -> list[str]:
    return [part.strip() for part in benefits.split(",")]


def create_segments(
    network: str,
    product_name: str,
    benefits: str = "",
    brand: str = "",
    audience: str = "",
    tone: str = "",
) -> Timeline:
    """Build the four-segment script for a network.

    Durations follow the template length: hook min(6, 20%), demo
    min(18, 45%), proof min(10, 20%), and the call to action takes the
    rest but never less than 5 seconds.
    """
    template = get_template(network)
    benefits = benefits or "benefícios exclusivos"
    audience = audience or "sua audiência"
    persona = brand or "sua marca"
    chosen_tone = tone or template.tone
    total = template.default_duration
    parts = _benefit_parts(benefits)

    hook_duration = min(6, total * 0.2)
    body_duration = min(18, total * 0.45)
    proof_duration = min(10, total * 0.2)
    cta_duration = max(5, total - (hook_duration + body_duration + proof_duration))

    drafts = [
        ("hook", "Abertura", hook_duration,
         f"{template.hook_style} {audience}, conheça {product_name} – {' '.join(parts[:1])}"),
        ("body", "Demonstração", body_duration,
         f"{persona} apresenta: {'. '.join(parts[:3])}."),
        ("proof", "Prova Social", proof_duration,
         f'Clientes reais relatam: "{product_name} transformou nossa rotina."'),
        ("cta", "Chamada Final", cta_duration,
         f"{template.call_to_action} {audience}, garanta o seu hoje mesmo!"),
    ]

    return Timeline.from_segments([
        ScriptSegment(
            id=segment_id,
            title=title,
            text=f"{text} (Tom: {chosen_tone.lower()})",
            duration=duration,
        )
        for segment_id, title, duration, text in drafts
    ])


def build_caption(
    network: str,
    product_name: str,
    brand: str,
    audience: str,
    timeline: Timeline,
) -> str:
    """Post caption: headline, audience line, one bullet per segment, CTA."""
    template = get_template(network)
    points = [f"• {s.title}: {s.text}" for s in timeline.segments]
    return "\n".join([
        f"{product_name} por {brand or 'sua marca'}",
        f"Pensado para {audience or 'quem busca inovação'}",
        *points,
        template.call_to_action,
    ])


def compose_hashtags(network: str, product_name: str) -> list[str]:
    """Up to HASHTAG_LIMIT unique, lowercase hashtags.

    The first two words of the product name longer than two characters
    come first, followed by the network's stock tags.
    """
    template = get_template(network)
    from_product = [
        "#" + re.sub(r"[^a-zA-Z0-9]", "", chunk)
        for chunk in product_name.split(" ")
        if len(chunk) > 2
    ][:2]

    unique = []
    for tag in [*from_product, *template.hashtags]:
        tag = tag.lower()
        if tag not in unique:
            unique.append(tag)
    return unique[:HASHTAG_LIMIT]


def generate_script(
    network: str = DEFAULT_NETWORK,
    product_name: str = "",
    benefits: str = "",
    brand: str = "",
    audience: str = "",
    tone: str = "",
) -> dict:
    """Generate the full script package for a product.

    Empty fields take the same defaults the web form used.

    Returns:
        Dict with template (SocialTemplate), timeline (Timeline),
        caption (str), hashtags (list[str]).
    """
    product_name = product_name or DEFAULT_PRODUCT
    benefits = benefits or DEFAULT_BENEFITS
    brand = brand or DEFAULT_BRAND
    audience = audience or DEFAULT_AUDIENCE

    timeline = create_segments(network, product_name, benefits, brand, audience, tone)
    return {
        "template": get_template(network),
        "timeline": timeline,
        "caption": build_caption(network, product_name, brand, audience, timeline),
        "hashtags": compose_hashtags(network, product_name),
    }
