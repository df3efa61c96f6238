from datetime import datetime, timezone

import numpy as np
import streamlit as st

from callrisk.analytics import risk_distribution
from callrisk.batch import load_calls_csv, records_from_frame, score_calls
from callrisk.config import CLAIM_STATUSES, HIGH_RISK_THRESHOLD, ISSUE_TYPES, STATUS_WAITING, configure_logging
from callrisk.queue import CallQueue
from callrisk.records import build_call
from callrisk.router import assess_call
from callrisk.simulator import (
    generate_initial_queue,
    generate_refresh_batch,
    generate_sample_calls,
    new_call_id,
)
from callrisk.triage import triage_query

configure_logging()

st.set_page_config(page_title="Call Abandonment Risk", layout="wide")
st.title("Call Abandonment Prevention (Operations Demo)")
st.caption("Live queue → Risk score + Priority + Recommended action")

if "rng" not in st.session_state:
    st.session_state.rng = np.random.default_rng()
if "queue" not in st.session_state:
    st.session_state.queue = CallQueue(generate_initial_queue(st.session_state.rng))
if "triage" not in st.session_state:
    st.session_state.triage = None

rng = st.session_state.rng
queue: CallQueue = st.session_state.queue

# Catch up the simulated clock on every rerun
queue.advance(datetime.now(timezone.utc), rng)

with st.sidebar:
    st.header("Queue Management")

    upload = st.file_uploader("Upload call CSV", type=["csv"])
    if st.button("Send Batch", disabled=upload is None):
        try:
            scored = score_calls(load_calls_csv(upload))
        except ValueError as e:
            st.error(str(e))
        else:
            n = queue.extend(records_from_frame(scored, rng, taken=queue.call_ids()))
            st.toast(f"{n} calls processed and added to queue")

    if st.button("Refresh Queue"):
        try:
            n = queue.extend(generate_refresh_batch(rng))
        except ValueError as e:
            st.error(str(e))
        else:
            st.toast(f"{n} new calls added to queue")

    if st.button("Load Sample Data"):
        try:
            n = queue.extend(generate_sample_calls(rng))
        except ValueError as e:
            st.error(str(e))
        else:
            st.toast(f"{n} sample calls added to queue for testing")

    st.header("Quick Actions")
    if st.button("Emergency Callback"):
        affected = queue.emergency_callback(rng)
        if affected:
            st.error(f"Emergency protocol activated: {len(affected)} high-risk calls moved to emergency callback queue")
        else:
            st.info("No calls currently require emergency intervention")

    if st.button("Deploy AI Assistant"):
        st.toast("Virtual assistant is now handling incoming calls for initial triage")

    if st.button("Send SMS Deflection"):
        eligible = queue.sms_deflection_candidates()
        if eligible:
            st.success(f"{len(eligible)} customers sent self-service SMS options")
        else:
            st.info("No calls have been waiting long enough for SMS deflection")

    st.header("Filters")
    priority_filter = st.selectbox(
        "Priority level",
        ["all", "high", "medium", "low"],
        format_func=lambda v: "All priorities" if v == "all" else f"{v.title()} risk",
    )
    sort_by = st.selectbox(
        "Sort by",
        ["probability", "wait_time"],
        format_func=lambda v: "Risk score" if v == "probability" else "Wait time",
    )

m = queue.metrics()
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Calls", m.total_calls)
c2.metric("Avg Wait Time", f"{m.avg_wait_time // 60}:{m.avg_wait_time % 60:02d}")
c3.metric("Predicted Abandonment", f"{m.predicted_abandonment_rate:.1f}%")
c4.metric("Success Rate", f"{m.success_rate:.1f}%", help=f"{m.calls_answered} answered, {m.calls_abandoned} abandoned")

tab_queue, tab_triage, tab_callbacks, tab_analytics = st.tabs(
    ["Live Queue", "AI Triage", "Smart Callbacks", "Analytics"]
)

with tab_queue:
    top = st.columns([1, 1, 4])
    if top[0].button("Refresh", key="refresh_main"):
        st.rerun()
    if top[1].button("Clear Queue"):
        queue.clear()
        st.toast("All calls have been removed from the queue")
        st.rerun()

    calls = queue.filtered(priority_filter, sort_by)
    if not calls:
        st.info("No calls in queue.")

    for call in calls:
        with st.container(border=True):
            left, mid, right = st.columns([2, 2, 3])
            with left:
                st.markdown(f"**{call.customer_name}**  \n`{call.call_id}`  \n{call.phone_number}")
                st.write(f"{call.issue_type} · {call.claim_status or 'n/a'} · ${call.charge:,.2f}")
            with mid:
                wait = int(call.wait_time)
                st.write(f"Wait: {wait // 60}:{wait % 60:02d}")
                st.write(f"Risk: **{call.probability * 100:.1f}%** ({call.priority})")
                st.write(f"Suggested: {call.predicted_action}")
                st.write(f"Status: {call.status}" + (f" · {call.agent_assigned}" if call.agent_assigned else ""))
            with right:
                disabled = call.status != STATUS_WAITING
                b1, b2, b3 = st.columns(3)
                for col, action, label in [(b1, "priority", "Priority"), (b2, "callback", "Callback"), (b3, "bot", "Bot")]:
                    if col.button(label, key=f"{action}_{call.call_id}", disabled=disabled):
                        result = queue.take_action(call.call_id, action, rng)
                        st.toast(result.message)
                        st.rerun()

    st.divider()
    st.subheader("Manual Risk Assessment")
    with st.form("manual_call", clear_on_submit=True):
        f1, f2 = st.columns(2)
        name = f1.text_input("Customer name")
        phone = f2.text_input("Phone number")
        issue = f1.selectbox("Issue type", [""] + ISSUE_TYPES)
        status = f2.selectbox("Claim status", CLAIM_STATUSES)
        wait_time = f1.number_input("Wait time (seconds)", min_value=0, value=0, step=15)
        charge = f2.number_input("Charge", min_value=0.0, value=0.0, step=10.0)
        submitted = st.form_submit_button("Predict Risk", type="primary")

    if submitted:
        try:
            call = build_call(
                call_id=new_call_id(rng),
                customer_name=name,
                issue_type=issue,
                wait_time=wait_time,
                charge=charge,
                claim_status=status,
                phone_number=phone,
            )
        except ValueError:
            st.error("Please fill in customer name and issue type")
        else:
            queue.add(call)
            assessment = assess_call(call.features())
            msg = f"Call {call.call_id} added to queue with {call.probability * 100:.1f}% abandonment risk"
            if call.probability > HIGH_RISK_THRESHOLD:
                st.error(msg)
            else:
                st.success(msg)
            st.write("**Risk rationale:**", assessment.reason)

with tab_triage:
    st.subheader("AI Triage")
    query = st.text_area("Customer query", height=120, placeholder="Example: I was charged twice this month...")

    t1, t2 = st.columns([1, 1])
    if t1.button("Process Query", type="primary"):
        try:
            with st.spinner("Processing query..."):
                st.session_state.triage = triage_query(query, rng)
        except ValueError:
            st.warning("Please enter a customer query to process")
    if t2.button("Clear Response"):
        st.session_state.triage = None

    result = st.session_state.triage
    if result is not None:
        st.write(result.response)
        if result.escalated:
            st.error("Escalation required")
        else:
            st.success("Resolved by assistant")

with tab_callbacks:
    st.subheader("Pending Callbacks")
    pending = queue.pending_callbacks()
    if not pending:
        st.info("No callbacks scheduled. Use the Callback action on a waiting call.")
    for call in pending:
        st.write(f"- **{call.customer_name}** ({call.call_id}) · scheduled {call.callback_at:%H:%M:%S} UTC")

    st.subheader("SMS Deflection Candidates")
    candidates = queue.sms_deflection_candidates()
    st.write(f"{len(candidates)} waiting calls over 3 minutes")
    for call in candidates:
        st.write(f"- {call.customer_name}: {call.phone_number}")

with tab_analytics:
    df = queue.to_frame()
    st.subheader("Risk Distribution")
    dist = risk_distribution(df)
    d1, d2, d3 = st.columns(3)
    d1.metric("High Risk (>70%)", dist["High"])
    d2.metric("Medium Risk (40-70%)", dist["Medium"])
    d3.metric("Low Risk (<40%)", dist["Low"])

    if not df.empty:
        st.bar_chart(df.groupby("issue_type")["probability"].mean())
        st.dataframe(
            df[["call_id", "customer_name", "issue_type", "claim_status", "wait_time", "charge",
                "probability", "priority", "predicted_action", "status"]],
            use_container_width=True,
        )
