# app/curated_feeds.py
"""
Catalogue of known-good feeds offered to users when adding sources.

Organized by category; each entry is {title, url, description}.
"""

CURATED_FEEDS: dict[str, list[dict[str, str]]] = {
    "News": [
        {"title": "BBC News", "url": "http://feeds.bbci.co.uk/news/rss.xml", "description": "Latest news from BBC"},
        {"title": "CNN", "url": "http://rss.cnn.com/rss/edition.rss", "description": "Latest news from CNN"},
        {"title": "Reuters", "url": "http://feeds.reuters.com/reuters/topNews", "description": "Top news from Reuters"},
        {"title": "NPR News", "url": "https://feeds.npr.org/1001/rss.xml", "description": "National Public Radio news"},
        {"title": "The Guardian", "url": "https://www.theguardian.com/world/rss", "description": "World news from The Guardian"},
    ],
    "Technology": [
        {"title": "TechCrunch", "url": "https://techcrunch.com/feed/", "description": "Latest technology news and startups"},
        {"title": "Wired", "url": "https://www.wired.com/feed/rss", "description": "Tech trends and innovations"},
        {"title": "The Verge", "url": "https://www.theverge.com/rss/index.xml", "description": "Technology, science, art, and culture"},
        {"title": "Ars Technica", "url": "http://feeds.arstechnica.com/arstechnica/index", "description": "Tech news and analysis"},
        {"title": "Hacker News", "url": "https://news.ycombinator.com/rss", "description": "Startup and tech news aggregator"},
    ],
    "Science": [
        {"title": "Science Daily", "url": "https://www.sciencedaily.com/rss/all.xml", "description": "Latest science research news"},
        {"title": "NASA", "url": "https://www.nasa.gov/rss/dyn/breaking_news.rss", "description": "Space and astronomy news from NASA"},
        {"title": "Nature", "url": "https://www.nature.com/nature.rss", "description": "International journal of science"},
        {"title": "New Scientist", "url": "https://www.newscientist.com/feed/home/?cmpid=RSS", "description": "Science and technology news"},
    ],
    "Business": [
        {"title": "Forbes", "url": "https://www.forbes.com/business/feed/", "description": "Business news and insights"},
        {"title": "Financial Times", "url": "https://www.ft.com/rss/home/uk", "description": "Financial and business news"},
        {"title": "The Economist", "url": "https://www.economist.com/finance-and-economics/rss.xml", "description": "Economic analysis and insights"},
        {"title": "Wall Street Journal", "url": "https://feeds.a.dj.com/rss/RSSMarketsMain.xml", "description": "Markets and business news"},
    ],
    "Entertainment": [
        {"title": "Variety", "url": "https://variety.com/feed/", "description": "Entertainment industry news"},
        {"title": "Hollywood Reporter", "url": "https://www.hollywoodreporter.com/feed/", "description": "Film, TV, and entertainment news"},
        {"title": "Rolling Stone", "url": "https://www.rollingstone.com/feed/", "description": "Music, film, TV, and culture news"},
    ],
    "Sports": [
        {"title": "ESPN", "url": "https://www.espn.com/espn/rss/news", "description": "Sports news and analysis"},
        {"title": "BBC Sport", "url": "https://feeds.bbci.co.uk/sport/rss.xml", "description": "Sports news from BBC"},
        {"title": "Sky Sports", "url": "https://www.skysports.com/rss/0,20514,11095,00.xml", "description": "Sports news and updates"},
    ],
    "Health": [
        {"title": "Medical News Today", "url": "https://www.medicalnewstoday.com/newsfeeds/rss/medical_news_today.xml", "description": "Latest medical research and health news"},
        {"title": "Harvard Health", "url": "https://www.health.harvard.edu/blog/feed", "description": "Health information from Harvard Medical School"},
        {"title": "NIH News", "url": "https://www.nih.gov/news-events/news-releases/feed.xml", "description": "News releases from the National Institutes of Health"},
    ],
    "Food": [
        {"title": "Serious Eats", "url": "https://www.seriouseats.com/feed/all", "description": "Recipes and food science"},
        {"title": "Food52", "url": "https://food52.com/blog.rss", "description": "Recipes and kitchen stories"},
        {"title": "The Kitchn", "url": "https://www.thekitchn.com/main.rss", "description": "Cooking tips and recipes"},
    ],
    "Travel": [
        {"title": "Lonely Planet", "url": "https://www.lonelyplanet.com/blog/feed/atom/", "description": "Travel guides and stories"},
        {"title": "Condé Nast Traveler", "url": "https://www.cntraveler.com/feed/rss", "description": "Luxury travel and destinations"},
        {"title": "BBC Travel", "url": "http://feeds.bbci.co.uk/travel/rss.xml", "description": "Travel features from BBC"},
    ],
    "Design": [
        {"title": "Dezeen", "url": "https://www.dezeen.com/feed/", "description": "Architecture and design news"},
        {"title": "Design Milk", "url": "https://design-milk.com/feed/", "description": "Modern design"},
        {"title": "Core77", "url": "https://www.core77.com/feed", "description": "Industrial design"},
    ],
    "Programming": [
        {"title": "CSS-Tricks", "url": "https://css-tricks.com/feed/", "description": "Web design and development"},
        {"title": "Dev.to", "url": "https://dev.to/feed", "description": "Community posts for developers"},
        {"title": "Smashing Magazine", "url": "https://www.smashingmagazine.com/feed/", "description": "Web design and development"},
        {"title": "freeCodeCamp", "url": "https://www.freecodecamp.org/news/rss/", "description": "Programming tutorials"},
    ],
}


def feeds_for_category(category: str) -> list[dict[str, str]]:
    """Case-insensitive category lookup. Unknown categories return an empty list."""
    for name, feeds in CURATED_FEEDS.items():
        if name.lower() == category.strip().lower():
            return feeds
    return []
