"""slugserve - static HTML pages by slug plus an OAuth redirect landing."""
