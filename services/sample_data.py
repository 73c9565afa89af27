# services/sample_data.py
# 演示 / 种子数据的唯一来源：内存存储的初始菜单、populate、迁移都引用这里

MENU_ITEMS = [
    {"title": "Home", "url": "/", "children": []},
    {
        "title": "Scholarships",
        "url": "/scholarships",
        "children": [
            {"id": 21, "title": "Merit-Based", "url": "/scholarships/merit-based"},
            {"id": 22, "title": "Need-Based", "url": "/scholarships/need-based"},
            {"id": 23, "title": "Govt Funded", "url": "/scholarships/govt-funded"},
            {"id": 24, "title": "Fully Funded", "url": "/scholarships/fully-funded"},
        ],
    },
    {
        "title": "Articles",
        "url": "/articles",
        "children": [
            {"id": 31, "title": "Study Guide", "url": "/articles/study-guide"},
            {"id": 32, "title": "Visa Tips", "url": "/articles/visa-tips"},
            {"id": 33, "title": "Budgeting", "url": "/articles/budgeting"},
            {"id": 34, "title": "Housing", "url": "/articles/housing"},
        ],
    },
    {
        "title": "Countries",
        "url": "/countries",
        "children": [
            {"id": 41, "title": "USA", "url": "/countries/usa"},
            {"id": 42, "title": "UK", "url": "/countries/uk"},
            {"id": 43, "title": "Canada", "url": "/countries/canada"},
            {"id": 44, "title": "Australia", "url": "/countries/australia"},
            {"id": 45, "title": "Germany", "url": "/countries/germany"},
        ],
    },
    {
        "title": "Universities",
        "url": "/universities",
        "children": [
            {"id": 51, "title": "Top Ranked", "url": "/universities/top-ranked"},
            {"id": 52, "title": "Affordable", "url": "/universities/affordable"},
            {"id": 53, "title": "Admission Guide", "url": "/universities/admission-guide"},
        ],
    },
    {
        "title": "News",
        "url": "/news",
        "children": [
            {"id": 61, "title": "New Scholarships", "url": "/news/new-scholarships"},
            {"id": 62, "title": "Visa Changes", "url": "/news/visa-changes"},
            {"id": 63, "title": "University Updates", "url": "/news/university-updates"},
        ],
    },
]

SCHOLARSHIPS = [
    {
        "title": "Fulbright Foreign Student Program",
        "description": "Graduate study and research funding in the United States for students, "
                       "young professionals and artists from more than 160 countries.",
        "amount": "$40,000",
        "deadline": "October 15, 2025",
        "country": "United States",
        "tags": ["Fully Funded", "Merit-Based", "Graduate"],
        "level": "Graduate",
        "duration": "1-2 years",
        "isRenewable": False,
        "slug": "fulbright-foreign-student-program",
        "link": "https://foreign.fulbrightonline.org/",
    },
    {
        "title": "Chevening Scholarships",
        "description": "The UK government's global scholarship programme covering a one-year "
                       "master's degree at any UK university for future leaders.",
        "amount": "Full tuition + stipend",
        "deadline": "November 2, 2025",
        "country": "United Kingdom",
        "tags": ["Fully Funded", "Leadership", "Masters"],
        "level": "Masters",
        "duration": "1 year",
        "slug": "chevening-scholarships",
        "link": "https://www.chevening.org/",
    },
    {
        "title": "DAAD Scholarships",
        "description": "German Academic Exchange Service awards covering living costs, travel "
                       "and insurance for graduate study and research in Germany.",
        "amount": "€934/month + benefits",
        "deadline": "December 1, 2025",
        "country": "Germany",
        "tags": ["Partially Funded", "Research", "Graduate"],
        "level": "Graduate",
        "isRenewable": True,
        "slug": "daad-scholarships",
        "link": "https://www.daad.de/en/",
    },
    {
        "title": "Australia Awards Scholarships",
        "description": "Long-term development awards from the Department of Foreign Affairs "
                       "and Trade for study at participating Australian universities.",
        "amount": "Full tuition + living expenses",
        "deadline": "April 30, 2026",
        "country": "Australia",
        "tags": ["Fully Funded", "Development", "Undergraduate", "Graduate"],
        "slug": "australia-awards",
        "link": "https://www.dfat.gov.au/people-to-people/australia-awards",
    },
]

COUNTRIES = [
    {
        "name": "United States",
        "description": "The largest host of international students, with flexible degree "
                       "structures and extensive research opportunities.",
        "universities": 4500,
        "acceptanceRate": "High Acceptance Rate",
        "language": "English",
        "currency": "USD",
        "popularCities": ["Boston", "New York", "San Francisco"],
        "slug": "usa",
    },
    {
        "name": "United Kingdom",
        "description": "Home to Oxford and Cambridge; three-year bachelor's and one-year "
                       "master's programmes keep total study costs down.",
        "universities": 160,
        "acceptanceRate": "Moderate Acceptance",
        "language": "English",
        "currency": "GBP",
        "popularCities": ["London", "Edinburgh", "Manchester"],
        "slug": "uk",
    },
    {
        "name": "Canada",
        "description": "Affordable, highly ranked universities with generous post-graduation "
                       "work permits and immigration pathways.",
        "universities": 100,
        "acceptanceRate": "High Acceptance Rate",
        "language": "English, French",
        "currency": "CAD",
        "popularCities": ["Toronto", "Vancouver", "Montreal"],
        "slug": "canada",
    },
    {
        "name": "Germany",
        "description": "Tuition-free or low-cost public universities with close ties between "
                       "academic study and industry.",
        "universities": 380,
        "acceptanceRate": "Moderate Acceptance",
        "language": "German",
        "currency": "EUR",
        "popularCities": ["Berlin", "Munich", "Heidelberg"],
        "slug": "germany",
    },
]

UNIVERSITIES = [
    {
        "name": "Harvard University",
        "description": "Private Ivy League research university in Cambridge, Massachusetts, "
                       "founded in 1636.",
        "country": "United States",
        "location": "Cambridge, MA",
        "foundedYear": 1636,
        "ranking": 1,
        "scholarshipsAvailable": True,
        "features": ["World-class faculty", "Global alumni network", "Generous financial aid"],
        "slug": "harvard-university",
    },
    {
        "name": "University of Oxford",
        "description": "Collegiate research university in Oxford, England, and the oldest "
                       "university in the English-speaking world.",
        "country": "United Kingdom",
        "location": "Oxford",
        "foundedYear": 1096,
        "ranking": 2,
        "scholarshipsAvailable": True,
        "features": ["Tutorial-based learning", "Collegiate system"],
        "slug": "university-of-oxford",
    },
    {
        "name": "ETH Zurich",
        "description": "Swiss Federal Institute of Technology, a public research university "
                       "focused on science and engineering.",
        "country": "Switzerland",
        "location": "Zurich",
        "foundedYear": 1855,
        "ranking": 8,
        "features": ["Strong industry connections", "Multilingual environment"],
        "slug": "eth-zurich",
    },
    {
        "name": "University of Toronto",
        "description": "Public research university in Toronto, Canada, with three campuses "
                       "and a long record of medical research.",
        "country": "Canada",
        "location": "Toronto, ON",
        "foundedYear": 1827,
        "ranking": 18,
        "features": ["Diverse student body", "Urban campus"],
        "slug": "university-of-toronto",
    },
]

ARTICLES = [
    {
        "title": "10 Tips to Ace Your Student Visa Interview",
        "content": "Research the requirements of your destination, organise every document, "
                   "rehearse answers about your study plan and finances, and stay honest "
                   "and calm during the interview.",
        "summary": "How to prepare for and succeed in your student visa interview.",
        "slug": "visa-interview-tips",
        "publishDate": "2025-05-15",
        "author": "Sarah Johnson",
        "authorTitle": "Visa Consultant",
        "category": "Visa Tips",
    },
    {
        "title": "How to Budget for Your Study Abroad Experience",
        "content": "List tuition, rent, food, transport and insurance, look for unclaimed "
                   "scholarships, open a local account and keep an emergency fund of at "
                   "least one month of living costs.",
        "summary": "Managing your finances while studying in a foreign country.",
        "slug": "study-abroad-budget",
        "publishDate": "2025-06-03",
        "author": "Michael Chen",
        "authorTitle": "Financial Advisor",
        "category": "Budgeting",
    },
    {
        "title": "The Ultimate Guide to Finding Student Accommodation Abroad",
        "content": "Start searching three to six months early, compare university halls with "
                   "shared flats, check the neighbourhood and never pay a deposit before "
                   "verifying the listing.",
        "summary": "Options for student housing and how to secure a place.",
        "slug": "housing-guide",
        "publishDate": "2025-04-28",
        "author": "Emma Rodriguez",
        "authorTitle": "Housing Specialist",
        "category": "Housing",
    },
]

NEWS = [
    {
        "title": "Major Funding Initiative Announced for International STEM Students",
        "content": "A consortium of universities in the US, UK and Australia has announced a "
                   "$50 million fund covering tuition and stipends for up to 500 STEM "
                   "students a year from 2026.",
        "summary": "A new $50 million scholarship fund for international STEM students.",
        "publishDate": "2025-04-15",
        "category": "Breaking News",
        "isFeatured": True,
        "slug": "major-funding-initiative",
    },
    {
        "title": "UK Simplifies Student Visa Application Process",
        "content": "The Home Office is introducing a simplified online application, reduced "
                   "documentation and a shorter financial evidence period for students.",
        "summary": "Changes to streamline UK student visa applications.",
        "publishDate": "2025-03-10",
        "category": "Visa Updates",
        "isFeatured": False,
        "slug": "uk-simplifies-process",
    },
    {
        "title": "Canada Expands Post-Graduation Work Permit Program",
        "content": "Eligible graduates can now receive work permits of up to five years, with "
                   "new residency pathways in healthcare, technology and skilled trades.",
        "summary": "Extended work permits and residency pathways for graduates in Canada.",
        "publishDate": "2025-01-15",
        "category": "Immigration News",
        "isFeatured": True,
        "slug": "canada-expands-work-permits",
    },
]

# populate 时的写入顺序
DATASET = {
    "menu": MENU_ITEMS,
    "scholarships": SCHOLARSHIPS,
    "countries": COUNTRIES,
    "universities": UNIVERSITIES,
    "articles": ARTICLES,
    "news": NEWS,
}
