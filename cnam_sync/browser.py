from __future__ import annotations

import logging

from playwright.async_api import async_playwright

from .config import Settings

VIEW_BY_YEAR = "#m_c_planning_pPlanning_btnViewByYear"
PAGE_IDLE = 'document.body.style.cursor == "auto"'


class FetchFailure(RuntimeError):
    pass


async def fetch_planning_html(settings: Settings, headful: bool = False) -> str:
    """
    Open the planning page, switch it to the yearly view and return the
    rendered HTML. The view switch goes through an ASP.NET postback, so it
    has to be clicked in a real browser.
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=not headful)
        try:
            page = await browser.new_page()
            response = await page.goto(settings.planning_url)
            status = response.status if response is not None else None
            if status != 200:
                raise FetchFailure(f"Couldn't fetch the page. HTTP CODE {status}")
            logging.debug("Planning page status %s", status)

            await page.wait_for_selector(VIEW_BY_YEAR)
            await page.click(VIEW_BY_YEAR)
            await page.wait_for_function(PAGE_IDLE)
            return await page.content()
        finally:
            await browser.close()
