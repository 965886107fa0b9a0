import os
from datetime import datetime, timezone

import requests
import streamlit as st

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

API_URL = os.getenv("ARTICLES_API_URL", "http://localhost:8000/articles")
DRAFTS_URL = f"{API_URL}/drafts"

VIEWS = {
    "Published": API_URL,
    "Drafts": DRAFTS_URL,
}

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def api_call(method: str, url: str, **kwargs):
    """
    Send a request to the API. Returns the decoded JSON body, or None after
    showing an error in the page.
    """
    try:
        response = requests.request(method, url, timeout=5, **kwargs)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.ConnectionError:
        st.error(
            f"Cannot reach the API at {API_URL}. "
            "Start it with: `uvicorn main:app --reload`"
        )
    except requests.exceptions.HTTPError as e:
        try:
            detail = e.response.json().get("detail", e.response.text)
        except ValueError:
            detail = e.response.text
        st.error(f"{e.response.status_code}: {detail}")
    except Exception as e:
        st.error(f"Request failed: {e}")
    return None


def time_ago(timestamp: str) -> str:
    """Convert a UTC ISO datetime string to a human-readable 'X ago' label."""
    try:
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        seconds = max(0, int((datetime.now(timezone.utc) - dt).total_seconds()))
        if seconds < 60:
            return f"{seconds}s ago"
        minutes = seconds // 60
        if minutes < 60:
            return f"{minutes}m ago"
        hours = minutes // 60
        if hours < 24:
            return f"{hours}h ago"
        return f"{hours // 24}d ago"
    except (TypeError, ValueError):
        return "unknown"


# ─────────────────────────────────────────────────────────────────────────────
# Page config  (must be the first Streamlit call)
# ─────────────────────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Articles",
    page_icon="📝",
    layout="wide",
)

# ─────────────────────────────────────────────────────────────────────────────
# Sidebar — view switch + new article form
# ─────────────────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("⚙️ Controls")

    view = st.radio("Show", options=list(VIEWS))

    if st.button("🔄 Refresh", use_container_width=True):
        st.rerun()

    st.divider()
    st.subheader("New article")

    with st.form("create_article", clear_on_submit=True):
        title = st.text_input("Title")
        description = st.text_input("Description (optional)")
        body = st.text_area("Body")
        publish_now = st.checkbox("Publish immediately")
        submitted = st.form_submit_button("Create")

    if submitted:
        payload = {
            "title": title,
            "description": description or None,
            "body": body,
            "published": publish_now,
        }
        if api_call("POST", API_URL, json=payload) is not None:
            st.success(f"Created '{title}'")

# ─────────────────────────────────────────────────────────────────────────────
# Fetch data
# ─────────────────────────────────────────────────────────────────────────────

articles = api_call("GET", VIEWS[view]) or []

st.title(f"📝 {view} articles")
st.metric("Articles shown", len(articles))
st.divider()

# ─────────────────────────────────────────────────────────────────────────────
# Article cards
# ─────────────────────────────────────────────────────────────────────────────

if not articles:
    st.info("No articles here yet, or the API returned no results.")
else:
    for article in articles:
        article_id = article["id"]
        article_url = f"{API_URL}/{article_id}"

        with st.container():
            st.markdown(
                f"`#{article_id}` &nbsp;·&nbsp; "
                f"updated *{time_ago(article.get('updated_at'))}*"
            )
            st.markdown(f"### {article['title']}")
            if article.get("description"):
                st.caption(article["description"])
            with st.expander("Body"):
                st.write(article["body"])

            col1, col2 = st.columns(2)
            with col1:
                label = "Unpublish" if article["published"] else "Publish"
                if st.button(label, key=f"toggle-{article_id}"):
                    # Rerun only on success so a failure message stays visible
                    toggled = api_call("PATCH", article_url, json={"published": not article["published"]})
                    if toggled is not None:
                        st.rerun()
            with col2:
                if st.button("Delete", key=f"delete-{article_id}"):
                    if api_call("DELETE", article_url) is not None:
                        st.rerun()
            st.divider()
