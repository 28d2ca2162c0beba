"""
Reference corpus seed data.

The initial documents loaded into the document store at startup. Metadata
keys follow each category's variant in documents.document.
"""

from __future__ import annotations

from typing import Any

from fides_vera.documents.document import Document
from fides_vera.documents.store import DocumentStore


def get_corpus_documents() -> list[dict[str, Any]]:
    """
    Get create-requests for the reference corpus.

    Returned as raw payloads so the store allocates ids and validates them
    the same way it validates any other insert.
    """
    return [
        {
            "title": "Catechism of the Catholic Church",
            "content": (
                "The Catechism of the Catholic Church is a comprehensive summary of "
                "Catholic faith, morals, and doctrine. It serves as a reference text "
                "for teaching Catholic doctrine."
            ),
            "source": "Vatican",
            "category": "Catechism",
            "metadata": {"year": 1992},
        },
        {
            "title": "Vatican II Documents",
            "content": (
                "The Second Vatican Council (Vatican II) was an ecumenical council of "
                "the Catholic Church convened by Pope John XXIII and closed by Pope "
                "Paul VI. Its documents represent a major turning point in the modern "
                "Church."
            ),
            "source": "Vatican",
            "category": "Council Documents",
            "metadata": {"year": "1962-1965"},
        },
        {
            "title": "Papal Encyclicals",
            "content": (
                "Papal encyclicals are letters addressed by the Pope to Catholic "
                "bishops throughout the world, typically concerning matters of "
                "Catholic doctrine and morals."
            ),
            "source": "Vatican",
            "category": "Encyclicals",
            "metadata": {"type": "official teaching"},
        },
        {
            "title": "Lives of the Saints",
            "content": (
                "The lives of Catholic saints serve as models of Christian virtue and "
                "examples of faith in action."
            ),
            "source": "Catholic Tradition",
            "category": "Saints",
            "metadata": {"type": "biographical"},
        },
        {
            "title": "Scripture References",
            "content": (
                "The Bible is foundational to Catholic teaching, and Scripture "
                "references help to ground Church teaching in the revealed Word of God."
            ),
            "source": "Holy Bible",
            "category": "Scripture",
            "metadata": {"type": "sacred text"},
        },
        {
            "title": "The Theological Virtues",
            "content": (
                "The theological virtues are faith, hope, and charity. They dispose "
                "Christians to live in a relationship with the Holy Trinity, have God "
                "for their origin, motive, and object, and inform all the moral "
                "virtues. Charity is the greatest of these."
            ),
            "source": "Vatican",
            "category": "Catechism",
            "metadata": {
                "section": "Part Three, Section One, Chapter One, Article 7",
                "paragraphs": "1812-1829",
                "year": 1992,
            },
        },
        {
            "title": "Lumen Gentium",
            "content": (
                "The Dogmatic Constitution on the Church describes the Church as the "
                "People of God and a sacrament of communion with God and unity among "
                "all people, and sets out the universal call to holiness."
            ),
            "source": "Vatican",
            "category": "Council Documents",
            "metadata": {
                "document": "Lumen Gentium",
                "type": "Dogmatic Constitution",
                "year": 1964,
            },
        },
        {
            "title": "Deus Caritas Est",
            "content": (
                "God is love, and whoever abides in love abides in God. The encyclical "
                "reflects on the unity of eros and agape and on the Church's charitable "
                "activity as an expression of love."
            ),
            "source": "Vatican",
            "category": "Encyclicals",
            "metadata": {"pope": "Benedict XVI", "year": 2005, "type": "Encyclical"},
        },
        {
            "title": "Saint Francis of Assisi",
            "content": (
                "Francis renounced his inheritance to live in poverty, founded the "
                "Order of Friars Minor, and is remembered for his love of creation and "
                "his devotion to the poor."
            ),
            "source": "Catholic Tradition",
            "category": "Saints",
            "metadata": {
                "lifespan": "1181-1226",
                "feast": "October 4",
                "title": "Patron of Ecology",
            },
        },
        {
            "title": "The Sermon on the Mount",
            "content": (
                "In the Sermon on the Mount Jesus teaches the Beatitudes, the Lord's "
                "Prayer, and the command to love one's enemies and pray for those who "
                "persecute you."
            ),
            "source": "Holy Bible",
            "category": "Scripture",
            "metadata": {
                "testament": "New Testament",
                "books": "Matthew 5-7",
                "type": "Gospel",
            },
        },
    ]


def seed_document_store(store: DocumentStore) -> list[Document]:
    """
    Load the reference corpus into a document store.

    Args:
        store: The store to populate

    Returns:
        The created documents, in insertion order
    """
    return [store.create_document(payload) for payload in get_corpus_documents()]
