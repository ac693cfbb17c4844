WELCOME_TXT = """
## 🐟 Welcome to Digital Aqua!

Smart water monitoring & weather insights for aquaculture.

- **Upload** a photo of your weekly water test sheet.
- **Review** the readings the assistant picked out, fix anything it misread.
- **Track** every report and see how your pond changes over time.
- **Plan ahead** with a 6-day weather outlook and AI threat forecast.
"""

TIPS_SHORT_TXT = """
### 💡 Aqua Insights

- Ensure consistent feeding schedules.
- Regularly check aeration systems.
"""

TIPS_TXT = """
### 💡 Aquaculture Tips & Alerts

- **Tip:** Maintain optimal stocking density to reduce stress on fish/shrimp.
- **Alert:** Watch for sudden changes in water color or turbidity, which may indicate an algal bloom or contamination.
- **Tip:** Use high-quality feed appropriate for the species and growth stage.
- **Alert:** Extreme weather events (heavy rain, heatwaves) can significantly impact water quality. Be prepared to take corrective actions.
- **Tip:** Keep detailed records of water parameters, feeding, and stock health.
- **Tip:** Regularly clean pond bottoms to remove organic waste buildup.
- **Alert:** Monitor for signs of disease (e.g., lethargy, lesions, unusual swimming patterns) and consult an expert if needed.
"""

UPLOAD_HELP_TXT = (
    "Ensure the image is clear and parameters are legible. "
    "Supported formats: JPG, PNG, WebP."
)

EDIT_HELP_TXT = (
    "The assistant has extracted the following data. Please review and edit if necessary. "
    "Leave a field empty if the value was not measured."
)
