"""Built-in articles served when the store is empty or unreachable."""
from datetime import datetime, timezone

from perspective.schemas import ArticleCreate

PLACEHOLDER_IMAGE = "/placeholder.svg?height=400&width=600"

SEED_ARTICLES: list[ArticleCreate] = [
    ArticleCreate(
        id="mock-1",
        title="AI Breakthrough: New Model Understands Context Better Than Ever",
        description="Researchers have developed a new AI model that can understand context in conversations with unprecedented accuracy.",
        content=(
            "Researchers at a leading tech institute have developed a groundbreaking AI model that demonstrates "
            "remarkable ability to understand context in human conversations. The model, named ContextNet, uses a "
            "novel neural architecture that allows it to track conversational threads and maintain context awareness "
            "over extended interactions."
        ),
        source="Tech Insights",
        published_at=datetime(2023, 5, 10, tzinfo=timezone.utc),
        url="#",
        image_url=PLACEHOLDER_IMAGE,
        category="Technology",
        like_count=87,
        comment_count=32,
        view_count=543,
    ),
    ArticleCreate(
        id="mock-2",
        title="Global Markets Rally as Inflation Concerns Ease",
        description="Stock markets worldwide saw significant gains as new data suggests inflation may be cooling down.",
        content=(
            "Global financial markets rallied strongly on Thursday as newly released economic data indicated that "
            "inflation pressures might be easing in major economies. The S&P 500 climbed 1.8%, while European markets "
            "saw even larger gains with the STOXX 600 up 2.3%."
        ),
        source="Financial Times",
        published_at=datetime(2023, 5, 11, tzinfo=timezone.utc),
        url="#",
        image_url=PLACEHOLDER_IMAGE,
        category="Business",
        like_count=54,
        comment_count=21,
        view_count=412,
    ),
    ArticleCreate(
        id="mock-3",
        title="New Study Links Regular Exercise to Improved Mental Health",
        description="Research confirms that consistent physical activity significantly reduces symptoms of anxiety and depression.",
        content=(
            "A comprehensive study published in the Journal of Psychiatric Research has found strong evidence that "
            "regular exercise can significantly improve mental health outcomes. The research followed over 10,000 "
            "participants for five years."
        ),
        source="Health Journal",
        published_at=datetime(2023, 5, 9, tzinfo=timezone.utc),
        url="#",
        image_url=PLACEHOLDER_IMAGE,
        category="Health",
        like_count=112,
        comment_count=45,
        view_count=678,
    ),
    ArticleCreate(
        id="mock-4",
        title="Climate Summit Ends with Historic Agreement on Emissions",
        description="World leaders reach consensus on ambitious targets to reduce carbon emissions by 2030.",
        content=(
            "The International Climate Summit concluded yesterday with what many experts are calling a historic "
            "agreement on carbon emission reductions. The accord, signed by 195 nations, commits signatories to "
            "reducing their carbon emissions by at least 50% from 2010 levels by 2030."
        ),
        source="World News Network",
        published_at=datetime(2023, 5, 8, tzinfo=timezone.utc),
        url="#",
        image_url=PLACEHOLDER_IMAGE,
        category="World",
        like_count=93,
        comment_count=67,
        view_count=821,
    ),
    ArticleCreate(
        id="mock-5",
        title="Breakthrough in Quantum Computing Achieves 'Quantum Advantage'",
        description="Scientists demonstrate a quantum computer solving problems impossible for classical systems.",
        content=(
            "Scientists at a major research university have achieved what they're calling definitive proof of "
            "'quantum advantage', the point at which a quantum computer can solve problems that are practically "
            "impossible for classical computers."
        ),
        source="Science Today",
        published_at=datetime(2023, 5, 7, tzinfo=timezone.utc),
        url="#",
        image_url=PLACEHOLDER_IMAGE,
        category="Science",
        like_count=76,
        comment_count=29,
        view_count=534,
    ),
]
