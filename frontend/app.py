import os
import time

import requests
import streamlit as st

API_BASE = os.getenv("ADVENTURE_API_BASE", "http://127.0.0.1:3000")
API_GENERATE = f"{API_BASE}/generate-adventure"
API_STATUS = f"{API_BASE}/status"

PAGE_TITLE = "TTRPG Adventure Generator · Gemini"
POLL_INTERVAL_S = 3
POLL_TIMEOUT_S = 600


def poll_job(job_id: str, placeholder) -> dict:
    """Poll /status until the job leaves `processing` or we give up."""
    deadline = time.monotonic() + POLL_TIMEOUT_S
    started = time.monotonic()
    while time.monotonic() < deadline:
        r = requests.get(f"{API_STATUS}/{job_id}", timeout=30)
        if r.status_code == 404:
            return {"status": "failed", "data": "The server no longer knows this job."}
        r.raise_for_status()
        body = r.json()
        if body.get("status") != "processing":
            return body
        placeholder.caption(f"Still writing… {int(time.monotonic() - started)}s")
        time.sleep(POLL_INTERVAL_S)
    return {"status": "failed", "data": "Gave up waiting for the adventure."}


st.set_page_config(
    page_title=PAGE_TITLE,
    layout="wide",
    initial_sidebar_state="collapsed",
)

# ---------- STYLING ----------
st.markdown(
    """
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

    * {
        font-family: 'Inter', system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
    }

    [data-testid="stAppViewContainer"] {
        background:
            radial-gradient(circle at top left, #3b1f0f 0, transparent 55%),
            radial-gradient(circle at bottom right, #020617 0, transparent 60%),
            #0c0a09;
        color: #e7e5e4;
    }

    .card {
        background: rgba(28,25,23,0.96);
        border-radius: 1.15rem;
        padding: 1.2rem 1.25rem 1.3rem;
        border: 1px solid rgba(168,162,158,0.25);
        box-shadow: 0 18px 40px rgba(0,0,0,0.45);
    }

    .section-label {
        font-size: 0.78rem;
        text-transform: uppercase;
        color: #78716c;
        margin-bottom: 0.55rem;
        letter-spacing: 0.12em;
    }

    div.stButton > button {
        border-radius: 999px;
        padding: 0.4rem 1.4rem;
        border: 1px solid rgba(251,191,36,0.6);
        background: radial-gradient(circle at top left, #fbbf24, #d97706);
        color: #1c1917;
        font-weight: 600;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------- STATE ----------
if "adventure" not in st.session_state:
    st.session_state.adventure = None

# ---------- HEADER ----------
st.markdown(
    """
    <h2 style="margin-bottom:0rem;">TTRPG Adventure Generator</h2>
    <p style="font-size:0.82rem;color:#a8a29e;">
        Describe your table and a core idea; Gemini writes a ready-to-run adventure module in Markdown.
    </p>
    """,
    unsafe_allow_html=True,
)

left, right = st.columns([0.8, 1.2])

# =========================================================
# LEFT: PARAMETERS
# =========================================================
with left:
    st.markdown('<div class="card">', unsafe_allow_html=True)
    st.markdown('<div class="section-label">Adventure parameters</div>', unsafe_allow_html=True)

    system = st.text_input("Game system", "D&D 5e")
    players = st.text_input("Number of players", "4")
    experience = st.selectbox("Player experience", ["beginner", "intermediate", "veteran"])
    genre = st.text_input("Genre", "fantasy")
    tone = st.text_input("Tone", "lighthearted")
    concept = st.text_area("Core concept", "a goblin wedding", height=100)

    generate_clicked = st.button("Generate adventure")

    if generate_clicked:
        payload = {
            "system": system,
            "players": players,
            "experience": experience,
            "genre": genre,
            "tone": tone,
            "concept": concept,
        }
        progress = st.empty()
        try:
            with st.spinner("Gemini is writing your adventure…"):
                r = requests.post(API_GENERATE, json=payload, timeout=POLL_TIMEOUT_S)
                if r.status_code == 202:
                    body = poll_job(r.json()["jobId"], progress)
                elif r.ok:
                    body = {"status": "complete", "data": r.json().get("adventureText", "")}
                else:
                    body = {"status": "failed", "data": r.json().get("error", r.text)}
        except requests.exceptions.RequestException as e:
            st.error(f"Could not reach backend: {e}")
        else:
            progress.empty()
            if body["status"] == "complete":
                st.session_state.adventure = body["data"]
                st.success("Adventure ready.")
            else:
                st.error(body.get("data") or "Generation failed.")

    st.markdown("</div>", unsafe_allow_html=True)

# =========================================================
# RIGHT: RESULT
# =========================================================
with right:
    st.markdown('<div class="card">', unsafe_allow_html=True)
    st.markdown('<div class="section-label">Adventure</div>', unsafe_allow_html=True)

    adventure = st.session_state.adventure
    if not adventure:
        st.caption("No adventure yet. Fill in the parameters and click **Generate adventure**.")
    else:
        st.download_button(
            "Download Markdown",
            data=adventure,
            file_name="adventure.md",
            mime="text/markdown",
        )
        st.markdown(adventure)

    st.markdown("</div>", unsafe_allow_html=True)
