import streamlit as st


def show():
    st.title("About")
    st.markdown("### fsQCA of Public Service Delivery")
    st.markdown("---")

    st.header("Purpose")
    st.write(
        """
        Assesses which configurations of digital public service features lead
        to successful public service delivery (PSD), where success is proxied
        by positive citizen perception scores across countries.
        """
    )

    st.header("Method")
    st.write(
        """
        Fuzzy-set Qualitative Comparative Analysis (fsQCA):

        1. **Calibration**: direct calibration of every raw indicator with a
           researcher-chosen triplet (full non-membership, crossover, full
           membership). No case may end up at exactly 0.5.
        2. **Necessity**: consistency, relevance and coverage of every
           condition and its negation, plus necessary disjunctions.
        3. **Truth table**: every case lands in one of the 2^k corners; corners
           above the consistency cutoff are positive, corners without cases
           are logical remainders.
        4. **Minimization**: complex, intermediate and parsimonious solutions.
        """
    )

    st.header("Conditions")
    st.markdown(
        """
        | Set | Indicator |
        |---|---|
        | fs_user_support | Effectiveness of online help tools |
        | fs_eid | Use of electronic identification |
        | fs_availability | Online and mobile availability of services |
        | fs_edocument | Online submission and download of documents |
        | fs_transparency | Transparency of service delivery, design and personal data |
        | fs_prefilled | Pre-filled online forms |
        """
    )

    st.header("References")
    st.write(
        """
        - Ragin, C. (2008). *Redesigning Social Inquiry: Fuzzy Sets and Beyond*.
        - Oana, I.-E., Schneider, C. Q., & Thomann, E. (2021).
          *Qualitative Comparative Analysis Using R*.
        """
    )


if __name__ == "__main__":
    show()
