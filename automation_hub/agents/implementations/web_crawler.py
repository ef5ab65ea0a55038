"""
Web crawler agent: crawling and data extraction from websites.
"""

from ..base import AgentQuestion, AgentTemplate

web_crawler_agent = AgentTemplate(
    id="web_crawler",
    name="Web Crawler Agent",
    description="Automated web crawling and data extraction from websites",
    icon="globe",
    system_prompt="""You are a web crawling and data extraction specialist. Your role is to help users automate web data collection by:
1. Understanding what data they need to extract from websites
2. Analyzing website structure and identifying the best extraction strategy
3. Handling pagination, dynamic content, and anti-scraping measures
4. Storing and organizing extracted data
5. Scheduling recurring crawls

Ask detailed questions to understand:
- Target websites and specific pages
- Data points to extract (text, images, links, structured data)
- How to handle JavaScript-rendered content
- Crawl depth and link following rules
- Rate limiting and politeness policies
- Data storage and export formats

Generate robust crawlers that respect robots.txt and implement proper error handling.""",
    initial_message="""Hi! I'm the Web Crawler Agent. I'll help you build automated web crawlers to extract data from websites.

What website(s) do you want to crawl, and what data do you need to extract?""",
    questions=[
        AgentQuestion(
            id="target_url",
            question="What is the starting URL for the crawl?",
            type="text",
            placeholder="https://example.com/products",
            helper_text="The URL where the crawler should begin",
        ),
        AgentQuestion(
            id="crawl_scope",
            question="Should the crawler follow links?",
            type="choice",
            options=[
                "Single page only",
                "Follow links on same domain",
                "Follow links matching pattern (specify next)",
                "Full site crawl",
            ],
        ),
        AgentQuestion(
            id="data_to_extract",
            question="What specific data should be extracted?",
            type="text",
            placeholder="e.g., Product names, prices, descriptions, image URLs, ratings",
            helper_text="List all data points you need",
        ),
        AgentQuestion(
            id="dynamic_content",
            question="Does the website load content dynamically with JavaScript?",
            type="choice",
            options=[
                "Yes - needs headless browser (Puppeteer/Selenium)",
                "No - static HTML is fine",
                "Not sure",
            ],
        ),
        AgentQuestion(
            id="pagination",
            question="How should pagination be handled?",
            type="choice",
            options=[
                "No pagination",
                '"Next" button clicking',
                "Page number URLs",
                "Infinite scroll",
                "Load more button",
            ],
        ),
        AgentQuestion(
            id="rate_limit",
            question="What delay between requests? (to be respectful to servers)",
            type="choice",
            options=["1 second", "2-3 seconds", "5 seconds", "10+ seconds", "As fast as possible"],
        ),
        AgentQuestion(
            id="auth_required",
            question="Does the website require login/authentication?",
            type="choice",
            options=["Yes - provide credentials", "Yes - use session cookies", "No"],
        ),
        AgentQuestion(
            id="output_format",
            question="How should extracted data be saved?",
            type="choice",
            options=[
                "JSON file",
                "CSV file",
                "Database (SQLite/PostgreSQL)",
                "Excel spreadsheet",
                "Multiple formats",
            ],
        ),
        AgentQuestion(
            id="schedule",
            question="How often should this crawler run?",
            type="choice",
            options=["One-time only", "Hourly", "Daily", "Weekly", "On-demand"],
        ),
    ],
    capabilities=[
        "Static HTML scraping",
        "JavaScript rendering (headless browsers)",
        "Pagination handling",
        "Rate limiting and politeness",
        "Authentication support",
        "Data normalization",
        "Duplicate detection",
        "Incremental crawling",
    ],
    example_outputs=[
        "Python script with BeautifulSoup + Requests",
        "Node.js script with Puppeteer",
        "Scrapy project (Python)",
        "Playwright script (TypeScript)",
    ],
)
