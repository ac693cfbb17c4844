import argparse
import os
import sys

_parser = argparse.ArgumentParser(add_help=False)
_parser.add_argument("--mode", type=str, default=None)
_args, _unknown = _parser.parse_known_args(sys.argv[1:])
if _args.mode is not None:
    # must be set before llm_config is imported
    os.environ["UI_TEST_MODE"] = "true" if _args.mode == "test" else "false"

import gradio as gr  # noqa: E402

from app_config import APP_NAME, configure_logging  # noqa: E402
from logic.logic_analysis import (  # noqa: E402
    apply_forecast_action,
    apply_threat_action,
    fetch_forecast_action,
    fetch_threat_action,
    leave_analysis_action,
    view_latest_report_action,
    view_report_action,
)
from logic.logic_session import start_session  # noqa: E402
from logic.logic_upload import (  # noqa: E402
    analyze_upload_action,
    back_to_dashboard_action,
    cancel_edit_action,
    open_past_reports_action,
    open_upload_action,
    save_edits_action,
)
from logic.logic_user import (  # noqa: E402
    back_to_entry_action,
    back_to_otp_action,
    change_number_action,
    get_started_action,
    load_session_action,
    logout_action,
    register_action,
    send_otp_action,
    verify_otp_action,
)
from logic.logic_views import EDIT_FIELD_NAMES, RENDER_OUTPUTS  # noqa: E402
from models import FARMING_TYPES, PARAMETER_DISPLAY_ORDER, parameter_label  # noqa: E402
from tips_board import (  # noqa: E402
    EDIT_HELP_TXT,
    TIPS_SHORT_TXT,
    TIPS_TXT,
    UPLOAD_HELP_TXT,
    WELCOME_TXT,
)

configure_logging()

ui = {}

with gr.Blocks(title=APP_NAME) as demo:
    # Global state
    session_state = gr.State(start_session())
    # results of in-flight fetches, applied to the live session afterwards
    forecast_state = gr.State(None)
    threat_state = gr.State(None)

    with gr.Row():
        gr.Markdown(f"# 🦐 {APP_NAME}")
        ui["logout_btn"] = gr.Button("Logout", variant="secondary", size="sm", visible=False)

    # ========== Entry ==========
    with gr.Column(visible=True) as ui["entry_panel"]:
        gr.Markdown(WELCOME_TXT)
        get_started_btn = gr.Button("Get Started", variant="primary")

    # ========== Phone verification ==========
    with gr.Column(visible=False) as ui["otp_panel"]:
        gr.Markdown("## 📱 Phone Verification")
        with gr.Column(visible=True) as ui["otp_phone_group"]:
            otp_phone = gr.Textbox(label="Enter Mobile Number", placeholder="10-digit number", max_lines=1)
            send_otp_btn = gr.Button("Send OTP", variant="primary")
        with gr.Column(visible=False) as ui["otp_code_group"]:
            ui["otp_sent_info"] = gr.Markdown("")
            ui["otp_code"] = gr.Textbox(label="Enter OTP", placeholder="4-digit OTP", max_lines=1)
            verify_otp_btn = gr.Button("Verify OTP", variant="primary")
            change_number_btn = gr.Button("Resend OTP / Change Number")
        ui["otp_error"] = gr.Markdown("")
        otp_back_btn = gr.Button("Back to Welcome", size="sm")

    # ========== Registration ==========
    with gr.Column(visible=False) as ui["registration_panel"]:
        gr.Markdown("## 📝 New User Registration")
        ui["reg_phone_info"] = gr.Markdown("")
        ui["reg_error"] = gr.Markdown("")
        reg_name = gr.Textbox(label="Name")
        reg_location = gr.Textbox(label="Farm Location (e.g., City, State)")
        reg_farming_type = gr.Dropdown(label="Type of Farming", choices=FARMING_TYPES, value=None)
        reg_farm_size = gr.Textbox(label="Farm Size (e.g., 10 acres, 5 ponds)")
        register_btn = gr.Button("Register", variant="primary")
        reg_back_btn = gr.Button("Back to Phone Verification", size="sm")

    # ========== Dashboard ==========
    with gr.Column(visible=False) as ui["dashboard_panel"]:
        ui["dash_greeting"] = gr.Markdown("")
        ui["dash_latest"] = gr.Markdown("")
        ui["dash_view_latest_btn"] = gr.Button("View Full Report & Threat Analysis", size="sm", visible=False)
        with gr.Row():
            with gr.Column():
                gr.Markdown("### 📤 New Water Report\nUpload a photo of your latest water test results for analysis.")
                dash_upload_btn = gr.Button("Upload New Report", variant="primary")
            with gr.Column():
                gr.Markdown("### 📄 Past Reports\nAccess and review all your previous water quality analyses.")
                ui["dash_history_btn"] = gr.Button("View Past Reports (0)", interactive=False)
        with gr.Row():
            ui["dash_weather"] = gr.Markdown("")
            with gr.Column():
                gr.Markdown(TIPS_SHORT_TXT)
                with gr.Accordion("More Tips", open=False):
                    gr.Markdown(TIPS_TXT)
        ui["dash_trend"] = gr.LinePlot(x="date", y="value", title="pH Trend", visible=False)
        ui["dash_empty"] = gr.Markdown("")

    # ========== Upload ==========
    with gr.Column(visible=False) as ui["upload_panel"]:
        upload_back_btn = gr.Button("Back to Dashboard", size="sm")
        gr.Markdown("## 📤 Upload Weekly Water Report")
        ui["upload_error"] = gr.Markdown("")
        ui["upload_image"] = gr.Image(label="Upload Photo of Water Test Report", type="filepath", sources=["upload"])
        analyze_btn = gr.Button("Analyze Report", variant="primary")
        gr.Markdown(UPLOAD_HELP_TXT)

    # ========== Review & confirm ==========
    with gr.Column(visible=False) as ui["edit_panel"]:
        edit_back_btn = gr.Button("Back to Upload", size="sm")
        gr.Markdown("## ✏️ Review & Confirm Analysis")
        gr.Markdown(EDIT_HELP_TXT)
        ui["edit_image"] = gr.HTML("")
        with gr.Row():
            with gr.Column():
                for key, name in list(zip(PARAMETER_DISPLAY_ORDER, EDIT_FIELD_NAMES))[:8]:
                    ui[name] = gr.Textbox(label=parameter_label(key, with_unit=True), max_lines=1)
            with gr.Column():
                for key, name in list(zip(PARAMETER_DISPLAY_ORDER, EDIT_FIELD_NAMES))[8:]:
                    ui[name] = gr.Textbox(label=parameter_label(key, with_unit=True), max_lines=1)
        ui["edit_notes"] = gr.Textbox(
            label="Notes (Optional)",
            lines=3,
            placeholder="Add any observations or manual corrections...",
        )
        save_btn = gr.Button("Save and View Full Analysis", variant="primary")

    # ========== Report view ==========
    with gr.Column(visible=False) as ui["analysis_panel"]:
        ui["analysis_back_btn"] = gr.Button("Back to Dashboard", size="sm")
        ui["analysis_header"] = gr.Markdown("")
        ui["analysis_threat"] = gr.Markdown("")
        ui["analysis_mismatch"] = gr.Markdown("")
        with gr.Row():
            with gr.Column(scale=2):
                ui["analysis_quality"] = gr.Markdown("")
                ui["analysis_suggestions"] = gr.Markdown("")
                ui["analysis_notes"] = gr.Markdown("")
            with gr.Column(scale=1):
                ui["analysis_image"] = gr.HTML("")
                ui["analysis_weather"] = gr.Markdown("")
        ui["analysis_chart"] = gr.BarPlot(x="parameter", y="value", title="Key Parameter Overview")

    # ========== Past reports ==========
    with gr.Column(visible=False) as ui["history_panel"]:
        history_back_btn = gr.Button("Back to Dashboard", size="sm")
        gr.Markdown("## 📚 Past Water Reports")
        ui["history_dropdown"] = gr.Dropdown(label="Open a report", choices=[])
        ui["history_list"] = gr.Markdown("")

    # ====== Event bindings ======

    outputs = [session_state] + [ui[name] for name in RENDER_OUTPUTS]
    edit_fields = [ui[name] for name in EDIT_FIELD_NAMES]

    def with_forecast(event):
        return event.then(
            fetch_forecast_action, inputs=[session_state], outputs=[forecast_state]
        ).then(apply_forecast_action, inputs=[session_state, forecast_state], outputs=outputs)

    def with_forecast_and_threats(event):
        return with_forecast(event).then(
            fetch_threat_action, inputs=[session_state], outputs=[threat_state]
        ).then(apply_threat_action, inputs=[session_state, threat_state], outputs=outputs)

    demo.load(load_session_action, inputs=[session_state], outputs=outputs)

    # Entry / phone verification / registration
    get_started_btn.click(get_started_action, inputs=[session_state], outputs=outputs)
    otp_back_btn.click(back_to_entry_action, inputs=[session_state], outputs=outputs)
    send_otp_btn.click(send_otp_action, inputs=[session_state, otp_phone], outputs=outputs)
    change_number_btn.click(change_number_action, inputs=[session_state], outputs=outputs)
    with_forecast(
        verify_otp_btn.click(verify_otp_action, inputs=[session_state, ui["otp_code"]], outputs=outputs)
    )
    reg_back_btn.click(back_to_otp_action, inputs=[session_state], outputs=outputs)
    with_forecast(
        register_btn.click(
            register_action,
            inputs=[session_state, reg_name, reg_location, reg_farming_type, reg_farm_size],
            outputs=outputs,
        )
    )

    # Logout
    ui["logout_btn"].click(logout_action, inputs=[session_state], outputs=outputs)

    # Dashboard navigation
    dash_upload_btn.click(open_upload_action, inputs=[session_state], outputs=outputs)
    ui["dash_history_btn"].click(open_past_reports_action, inputs=[session_state], outputs=outputs)
    for back_btn in (upload_back_btn, history_back_btn):
        with_forecast(back_btn.click(back_to_dashboard_action, inputs=[session_state], outputs=outputs))

    # Upload -> review -> save -> view
    analyze_btn.click(analyze_upload_action, inputs=[session_state, ui["upload_image"]], outputs=outputs)
    edit_back_btn.click(cancel_edit_action, inputs=[session_state], outputs=outputs)
    with_forecast_and_threats(
        save_btn.click(
            save_edits_action,
            inputs=[session_state, ui["edit_notes"]] + edit_fields,
            outputs=outputs,
        )
    )

    # Opening a report fetches weather, then the threat outlook
    with_forecast_and_threats(
        ui["dash_view_latest_btn"].click(view_latest_report_action, inputs=[session_state], outputs=outputs)
    )
    with_forecast_and_threats(
        ui["history_dropdown"].input(
            view_report_action,
            inputs=[session_state, ui["history_dropdown"]],
            outputs=outputs,
        )
    )

    with_forecast(ui["analysis_back_btn"].click(leave_analysis_action, inputs=[session_state], outputs=outputs))

if __name__ == "__main__":
    demo.launch()
